"""Initial JobTrack schema: accounts, linked identities, applications, contacts, skills, settings.

Revision ID: 001
Revises: None
Create Date: 2025-01-01 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String()),
        sa.Column("password_hash", sa.String()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("session_epoch", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "linked_identities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("linked_at", sa.DateTime()),
        sa.UniqueConstraint("provider", "subject", name="uq_identity_provider_subject"),
    )
    op.create_index("ix_linked_identities_user_id", "linked_identities", ["user_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_name", sa.String(), nullable=False),
        sa.Column("company_location", sa.String()),
        sa.Column("company_industry", sa.String()),
        sa.Column("company_salary_range", sa.String()),
        sa.Column("position", sa.String(), nullable=False),
        sa.Column("skills", sa.JSON()),
        sa.Column("application_date", sa.Date()),
        sa.Column("cover_letter", sa.Text()),
        sa.Column("salary_expectation", sa.String()),
        sa.Column("job_posting_url", sa.String()),
        sa.Column("job_posting_content", sa.Text()),
        sa.Column("source", sa.String()),
        sa.Column("work_type", sa.String()),
        sa.Column("status", sa.String(), nullable=False, server_default="applied"),
        sa.Column("notes", sa.Text()),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_applications_id", "applications", ["id"])
    op.create_index("ix_applications_user_id", "applications", ["user_id"])

    op.create_table(
        "application_contacts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "application_id", sa.Integer(),
            sa.ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", sa.String()),
        sa.Column("email", sa.String()),
        sa.Column("phone", sa.String()),
        sa.Column("linkedin", sa.String()),
        sa.Column("notes", sa.Text()),
    )
    op.create_index("ix_application_contacts_id", "application_contacts", ["id"])
    op.create_index("ix_application_contacts_application_id", "application_contacts", ["application_id"])

    op.create_table(
        "skill_suggestions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("locale", sa.String(), nullable=False, server_default="en"),
        sa.Column("popularity", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("locale", "label", name="uix_skill_locale_label"),
    )
    op.create_index("ix_skill_suggestions_id", "skill_suggestions", ["id"])
    op.create_index("ix_skill_suggestions_label", "skill_suggestions", ["label"])

    op.create_table(
        "user_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id", sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
        ),
        sa.Column("language", sa.String(), nullable=False, server_default="en"),
        sa.Column("custom_sources", sa.JSON()),
        sa.Column("custom_industries", sa.JSON()),
        sa.Column("updated_at", sa.DateTime()),
    )


def downgrade() -> None:
    # Dropping a table drops its indexes with it
    for table in (
        "user_settings",
        "skill_suggestions",
        "application_contacts",
        "applications",
        "linked_identities",
        "users",
    ):
        op.drop_table(table)
