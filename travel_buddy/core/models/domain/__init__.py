"""Domain enums shared by entities, I/O models and the matching engine."""

from __future__ import annotations

from .enums import (
    BudgetLevel,
    Destination,
    ExpenseCategory,
    GroupBudget,
    GroupRole,
    GroupType,
    Interest,
    JoinRequestStatus,
    JournalCategory,
    JournalPrivacy,
    JournalStatus,
    ListingCategory,
    ListingCondition,
    ListingStatus,
    MatchStatus,
    MatchType,
    MediaType,
    MemberStatus,
    MessageType,
    Mood,
    NotificationStatus,
    PersonalityType,
    SwipeAction,
    TravelPace,
    TravelStyle,
    TripStatus,
    UserRole,
    Weather,
)

__all__ = [
    "BudgetLevel",
    "Destination",
    "ExpenseCategory",
    "GroupBudget",
    "GroupRole",
    "GroupType",
    "Interest",
    "JoinRequestStatus",
    "JournalCategory",
    "JournalPrivacy",
    "JournalStatus",
    "ListingCategory",
    "ListingCondition",
    "ListingStatus",
    "MatchStatus",
    "MatchType",
    "MediaType",
    "MemberStatus",
    "MessageType",
    "Mood",
    "NotificationStatus",
    "PersonalityType",
    "SwipeAction",
    "TravelPace",
    "TravelStyle",
    "TripStatus",
    "UserRole",
    "Weather",
]
