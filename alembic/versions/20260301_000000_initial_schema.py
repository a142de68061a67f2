"""Initial schema for Travel Buddy

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables for the Travel Buddy
service:
- Accounts (users)
- Matching (swipes, matches)
- Private conversations (conversations, conversation_participants)
- Travel groups (travel_groups, group_members, group_join_requests)
- Chat messages for both conversations and groups (messages)
- Journals (travel_journals, journal_likes, journal_comments)
- Marketplace (marketplace_listings)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("photo", sa.String(255), nullable=False, server_default="default.jpg"),
        sa.Column("profile_picture", sa.String(512), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("personality_type", sa.String(32), nullable=True),
        sa.Column("location", sa.JSON(), nullable=True),
        sa.Column("travel_preferences", sa.JSON(), nullable=False),
        sa.Column("languages", sa.JSON(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="user"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("password_changed_at", sa.DateTime(), nullable=True),
        sa.Column("password_reset_token", sa.String(64), nullable=True),
        sa.Column("password_reset_expires", sa.DateTime(), nullable=True),
        sa.Column("login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lock_until", sa.DateTime(), nullable=True),
        sa.Column("last_active", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # Create swipes table
    op.create_table(
        "swipes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("swiper_id", sa.Integer(), nullable=False),
        sa.Column("swiped_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["swiper_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["swiped_id"], ["users.id"]),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
        sa.Index("ix_swipes_swiper_id", "swiper_id"),
        sa.Index("ix_swipes_swiped_id", "swiped_id"),
        sa.Index("ix_swipes_created_at", "created_at"),
    )

    # Create matches table; user ids are stored in ascending order
    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_one_id", sa.Integer(), nullable=False),
        sa.Column("user_two_id", sa.Integer(), nullable=False),
        sa.Column("match_score", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("initiated_by", sa.Integer(), nullable=True),
        sa.Column("notification_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("common_interests", sa.JSON(), nullable=False),
        sa.Column("match_type", sa.String(16), nullable=False, server_default="mutual"),
        sa.Column("initial_message_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("compatibility_factors", sa.JSON(), nullable=False),
        sa.Column("matched_on", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_one_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["user_two_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["initiated_by"], ["users.id"]),
        sa.UniqueConstraint("user_one_id", "user_two_id", name="uq_matches_user_pair"),
        sa.Index("ix_matches_user_one_id", "user_one_id"),
        sa.Index("ix_matches_user_two_id", "user_two_id"),
        sa.Index("ix_matches_matched_on", "matched_on"),
    )

    # Create conversations table
    op.create_table(
        "conversations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("last_message_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_conversations_updated_at", "updated_at"),
    )

    # Create conversation_participants table
    op.create_table(
        "conversation_participants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("conversation_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("conversation_id", "user_id", name="uq_conversation_participants"),
        sa.Index("ix_conversation_participants_conversation_id", "conversation_id"),
        sa.Index("ix_conversation_participants_user_id", "user_id"),
    )

    # Create travel_groups table
    op.create_table(
        "travel_groups",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("type", sa.String(16), nullable=False, server_default="travel"),
        sa.Column("travel_details", sa.JSON(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("avatar", sa.String(255), nullable=False, server_default="default-group.jpg"),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("message_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_activity", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.Index("ix_travel_groups_creator_id", "creator_id"),
        sa.Index("ix_travel_groups_updated_at", "updated_at"),
    )

    # Create group_members table
    op.create_table(
        "group_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="member"),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["group_id"], ["travel_groups.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members"),
        sa.Index("ix_group_members_group_id", "group_id"),
        sa.Index("ix_group_members_user_id", "user_id"),
    )

    # Create group_join_requests table
    op.create_table(
        "group_join_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("requested_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["group_id"], ["travel_groups.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_group_join_requests_group_id", "group_id"),
        sa.Index("ix_group_join_requests_user_id", "user_id"),
    )

    # Create messages table; a message belongs to a conversation or a group
    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("content", sa.String(2000), nullable=False),
        sa.Column("message_type", sa.String(16), nullable=False, server_default="text"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_by", sa.JSON(), nullable=False),
        sa.Column("edited_at", sa.DateTime(), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("conversation_id", sa.Integer(), nullable=True),
        sa.Column("group_id", sa.Integer(), nullable=True),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"]),
        sa.ForeignKeyConstraint(["group_id"], ["travel_groups.id"]),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.CheckConstraint("(conversation_id IS NULL) <> (group_id IS NULL)", name="ck_messages_single_parent"),
        sa.Index("ix_messages_conversation_id", "conversation_id"),
        sa.Index("ix_messages_group_id", "group_id"),
        sa.Index("ix_messages_sender_id", "sender_id"),
        sa.Index("ix_messages_created_at", "created_at"),
    )

    # Create travel_journals table
    op.create_table(
        "travel_journals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.String(5000), nullable=False),
        sa.Column("location", sa.JSON(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("media", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False, server_default="other"),
        sa.Column("mood", sa.String(16), nullable=False),
        sa.Column("weather", sa.String(16), nullable=False),
        sa.Column("expenses", sa.JSON(), nullable=False),
        sa.Column("companions", sa.JSON(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=True),
        sa.Column("privacy", sa.String(16), nullable=False, server_default="public"),
        sa.Column("status", sa.String(16), nullable=False, server_default="published"),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_edited_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["group_id"], ["travel_groups.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_travel_journals_user_id", "user_id"),
        sa.Index("ix_travel_journals_category", "category"),
        sa.Index("ix_travel_journals_privacy", "privacy"),
        sa.Index("ix_travel_journals_status", "status"),
        sa.Index("ix_travel_journals_created_at", "created_at"),
    )

    # Create journal_likes table
    op.create_table(
        "journal_likes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("journal_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["journal_id"], ["travel_journals.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("journal_id", "user_id", name="uq_journal_likes"),
        sa.Index("ix_journal_likes_journal_id", "journal_id"),
        sa.Index("ix_journal_likes_user_id", "user_id"),
    )

    # Create journal_comments table
    op.create_table(
        "journal_comments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("journal_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["journal_id"], ["travel_journals.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_journal_comments_journal_id", "journal_id"),
        sa.Index("ix_journal_comments_user_id", "user_id"),
    )

    # Create marketplace_listings table
    op.create_table(
        "marketplace_listings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False, server_default="Other"),
        sa.Column("condition", sa.String(16), nullable=False, server_default="Good"),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("location", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.CheckConstraint("price >= 0", name="ck_marketplace_listings_price"),
        sa.Index("ix_marketplace_listings_category", "category"),
        sa.Index("ix_marketplace_listings_created_by", "created_by"),
        sa.Index("ix_marketplace_listings_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("marketplace_listings")
    op.drop_table("journal_comments")
    op.drop_table("journal_likes")
    op.drop_table("travel_journals")
    op.drop_table("messages")
    op.drop_table("group_join_requests")
    op.drop_table("group_members")
    op.drop_table("travel_groups")
    op.drop_table("conversation_participants")
    op.drop_table("conversations")
    op.drop_table("matches")
    op.drop_table("swipes")
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_password_reset_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
