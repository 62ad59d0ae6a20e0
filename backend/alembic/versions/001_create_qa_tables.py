"""Create Q&A tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, questions, answers, tags, question_tags, votes and
       notifications with their constraints and indexes.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(1024), nullable=True),
        sa.Column("xp", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("streak", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_activity_date", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # ── questions ─────────────────────────────────────────────────────────
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(255), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("votes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        # No FK: answers already reference questions
        sa.Column("accepted_answer_id", sa.Integer(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_questions"),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], name="fk_questions_author_id_users",
        ),
    )
    op.create_index("ix_questions_author_id", "questions", ["author_id"])
    op.create_index("ix_questions_created_at", "questions", [sa.text("created_at DESC")])
    op.create_index("ix_questions_updated_at", "questions", [sa.text("updated_at DESC")])
    op.create_index("ix_questions_votes", "questions", [sa.text("votes DESC")])

    # ── answers ───────────────────────────────────────────────────────────
    op.create_table(
        "answers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.String(255), nullable=False),
        sa.Column("votes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_answers"),
        sa.ForeignKeyConstraint(
            ["question_id"], ["questions.id"],
            name="fk_answers_question_id_questions", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["users.id"], name="fk_answers_author_id_users",
        ),
    )
    op.create_index("ix_answers_author_id", "answers", ["author_id"])
    op.create_index(
        "ix_answers_question_id_votes", "answers", ["question_id", sa.text("votes DESC")],
    )

    # ── tags ──────────────────────────────────────────────────────────────
    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(7), nullable=False, server_default=sa.text("'#3B82F6'")),
        sa.Column("question_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_tags"),
        sa.UniqueConstraint("name", name="uq_tags_name"),
    )

    op.create_table(
        "question_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_question_tags"),
        sa.ForeignKeyConstraint(
            ["question_id"], ["questions.id"],
            name="fk_question_tags_question_id_questions", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"], ["tags.id"],
            name="fk_question_tags_tag_id_tags", ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "question_id", "tag_id", name="uq_question_tags_question_id_tag_id",
        ),
    )
    op.create_index("ix_question_tags_tag_id", "question_tags", ["tag_id"])

    # ── votes ─────────────────────────────────────────────────────────────
    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("target_type", sa.String(20), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.String(10), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_votes"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_votes_user_id_users"),
        sa.UniqueConstraint(
            "user_id", "target_type", "target_id",
            name="uq_votes_user_id_target_type_target_id",
        ),
        sa.CheckConstraint(
            "target_type IN ('question', 'answer')", name="ck_votes_target_type",
        ),
        sa.CheckConstraint("vote_type IN ('up', 'down')", name="ck_votes_vote_type"),
    )

    # ── notifications ─────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=True),
        sa.Column("answer_id", sa.Integer(), nullable=True),
        sa.Column("triggered_by_id", sa.String(255), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_notifications_user_id_users",
        ),
        sa.ForeignKeyConstraint(
            ["question_id"], ["questions.id"], name="fk_notifications_question_id_questions",
        ),
        sa.ForeignKeyConstraint(
            ["answer_id"], ["answers.id"], name="fk_notifications_answer_id_answers",
        ),
        sa.ForeignKeyConstraint(
            ["triggered_by_id"], ["users.id"], name="fk_notifications_triggered_by_id_users",
        ),
    )
    op.create_index(
        "ix_notifications_user_id_created_at",
        "notifications",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("votes")
    op.drop_table("question_tags")
    op.drop_table("tags")
    op.drop_table("answers")
    op.drop_table("questions")
    op.drop_table("users")
