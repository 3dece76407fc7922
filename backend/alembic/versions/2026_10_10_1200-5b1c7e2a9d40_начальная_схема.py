"""начальная схема

Revision ID: 5b1c7e2a9d40
Revises:
Create Date: 2026-10-10 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5b1c7e2a9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("tier", sa.String(), nullable=True),
        sa.Column("requirement_type", sa.String(), nullable=False),
        sa.Column("requirement_value", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_achievements")),
    )
    op.create_index(op.f("ix_achievements_id"), "achievements", ["id"], unique=False)
    op.create_index(op.f("ix_achievements_key"), "achievements", ["key"], unique=True)

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("language", sa.String(), nullable=True),
        sa.Column("quit_date", sa.Date(), nullable=True),
        sa.Column("daily_consumption", sa.Float(), nullable=True),
        sa.Column("consumption_unit", sa.String(), nullable=True),
        sa.Column("smoking_triggers", sa.JSON(), nullable=True),
        sa.Column("emotional_states", sa.JSON(), nullable=True),
        sa.Column("motivations", sa.JSON(), nullable=True),
        sa.Column("quit_archetype", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_user_profiles_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_profiles")),
        sa.UniqueConstraint("user_id", name=op.f("uq_user_profiles_user_id")),
    )
    op.create_index(op.f("ix_user_profiles_id"), "user_profiles", ["id"], unique=False)

    op.create_table(
        "cravings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("trigger", sa.String(), nullable=True),
        sa.Column("intensity", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_cravings_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_cravings")),
    )
    op.create_index(op.f("ix_cravings_id"), "cravings", ["id"], unique=False)
    op.create_index(op.f("ix_cravings_user_id"), "cravings", ["user_id"], unique=False)
    op.create_index(op.f("ix_cravings_type"), "cravings", ["type"], unique=False)

    op.create_table(
        "progress_stats",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("days_smoke_free", sa.Integer(), nullable=True),
        sa.Column("cigarettes_smoked", sa.Integer(), nullable=True),
        sa.Column("cigarettes_not_smoked", sa.Integer(), nullable=True),
        sa.Column("money_saved", sa.Float(), nullable=True),
        sa.Column("life_regained_hours", sa.Float(), nullable=True),
        sa.Column("nicotine_not_consumed_mg", sa.Float(), nullable=True),
        sa.Column("last_calculated", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_progress_stats_user_id_users")),
        sa.PrimaryKeyConstraint("user_id", name=op.f("pk_progress_stats")),
    )

    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("achievement_id", sa.Integer(), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["achievement_id"], ["achievements.id"], name=op.f("fk_user_achievements_achievement_id_achievements")),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_user_achievements_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_achievements")),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_id_achievement_id"),
    )
    op.create_index(op.f("ix_user_achievements_id"), "user_achievements", ["id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_user_achievements_id"), table_name="user_achievements")
    op.drop_table("user_achievements")
    op.drop_table("progress_stats")
    op.drop_index(op.f("ix_cravings_type"), table_name="cravings")
    op.drop_index(op.f("ix_cravings_user_id"), table_name="cravings")
    op.drop_index(op.f("ix_cravings_id"), table_name="cravings")
    op.drop_table("cravings")
    op.drop_index(op.f("ix_user_profiles_id"), table_name="user_profiles")
    op.drop_table("user_profiles")
    op.drop_index(op.f("ix_achievements_key"), table_name="achievements")
    op.drop_index(op.f("ix_achievements_id"), table_name="achievements")
    op.drop_table("achievements")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
