"""
Database entity models.

This package contains all database entity models organized by aggregate.

Modules:
- users: Accounts and travel profiles
- matches: Swipes and mutual matches
- conversations: Private conversations, participants and messages
- groups: Travel groups, members and join requests
- journals: Travel journals, likes and comments
- marketplace: Marketplace listings
"""

from . import conversations, groups, journals, marketplace, matches, users
from .conversations import Conversation, ConversationParticipant, Message
from .groups import Group, GroupJoinRequest, GroupMember
from .journals import JournalComment, JournalLike, TravelJournal
from .marketplace import MarketplaceListing
from .matches import Match, Swipe
from .users import User

__all__ = [
    "Conversation",
    "ConversationParticipant",
    "Group",
    "GroupJoinRequest",
    "GroupMember",
    "JournalComment",
    "JournalLike",
    "MarketplaceListing",
    "Match",
    "Message",
    "Swipe",
    "TravelJournal",
    "User",
    "conversations",
    "groups",
    "journals",
    "marketplace",
    "matches",
    "users",
]
