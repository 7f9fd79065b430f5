"""initial_claims_schema

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:44.512093

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

CLAIM_STATUSES = ("PENDING", "UNDER_REVIEW", "APPROVED", "REJECTED", "PAID")
USER_ROLES = ("LECTURER", "PROGRAMME_COORDINATOR", "ACADEMIC_MANAGER", "HR")

# The claimstatus type is created with the claims table and reused afterwards
existing_claim_status = postgresql.ENUM(
    *CLAIM_STATUSES, name="claimstatus", create_type=False
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("employee_id", sa.String(20), nullable=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("role", sa.Enum(*USER_ROLES, name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_users_department"), "users", ["department"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token", sa.String(36), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index(op.f("ix_sessions_user_id"), "sessions", ["user_id"])

    op.create_table(
        "claims",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("lecturer_id", sa.Uuid(), nullable=False),
        sa.Column("period", sa.Date(), nullable=False),
        sa.Column("hours_worked", sa.Numeric(6, 2), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(18, 4), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column(
            "status", sa.Enum(*CLAIM_STATUSES, name="claimstatus"), nullable=False
        ),
        sa.Column("submission_date", sa.DateTime(), nullable=False),
        sa.Column("approval_date", sa.DateTime(), nullable=True),
        sa.Column("stored_processing_days", sa.Integer(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["lecturer_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_claims_lecturer_id"), "claims", ["lecturer_id"])
    op.create_index(op.f("ix_claims_period"), "claims", ["period"])
    op.create_index(op.f("ix_claims_status"), "claims", ["status"])
    op.create_index(op.f("ix_claims_submission_date"), "claims", ["submission_date"])

    op.create_table(
        "claim_status_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("claim_id", sa.Uuid(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("old_status", existing_claim_status, nullable=False),
        sa.Column("new_status", existing_claim_status, nullable=False),
        sa.Column("changed_date", sa.DateTime(), nullable=False),
        sa.Column("changed_by", sa.String(100), nullable=False),
        sa.Column("changed_by_id", sa.Uuid(), nullable=True),
        sa.Column("change_notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["claim_id"], ["claims.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["changed_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "claim_id", "sequence", name="uq_claim_status_history_sequence"
        ),
    )
    op.create_index(
        op.f("ix_claim_status_history_claim_id"), "claim_status_history", ["claim_id"]
    )
    op.create_index(
        op.f("ix_claim_status_history_changed_date"),
        "claim_status_history",
        ["changed_date"],
    )

    op.create_table(
        "supporting_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("claim_id", sa.Uuid(), nullable=False),
        sa.Column("original_file_name", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("content_type", sa.String(100), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("upload_date", sa.DateTime(), nullable=False),
        sa.Column("uploaded_by", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["claim_id"], ["claims.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_supporting_documents_claim_id"), "supporting_documents", ["claim_id"]
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_supporting_documents_claim_id"), table_name="supporting_documents"
    )
    op.drop_table("supporting_documents")
    op.drop_index(
        op.f("ix_claim_status_history_changed_date"),
        table_name="claim_status_history",
    )
    op.drop_index(
        op.f("ix_claim_status_history_claim_id"), table_name="claim_status_history"
    )
    op.drop_table("claim_status_history")
    op.drop_index(op.f("ix_claims_submission_date"), table_name="claims")
    op.drop_index(op.f("ix_claims_status"), table_name="claims")
    op.drop_index(op.f("ix_claims_period"), table_name="claims")
    op.drop_index(op.f("ix_claims_lecturer_id"), table_name="claims")
    op.drop_table("claims")
    op.drop_index(op.f("ix_sessions_user_id"), table_name="sessions")
    op.drop_table("sessions")
    op.drop_index(op.f("ix_users_department"), table_name="users")
    op.drop_table("users")
    sa.Enum(name="claimstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
