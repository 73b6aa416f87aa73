"""create_marketplace_tables

Revision ID: 4c1d7e9a2b36
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d7e9a2b36"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create profiles, purchases and activity_log tables."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("contact_name", sa.String(length=100), nullable=False),
        sa.Column("phone_number", sa.String(length=30), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("cylinders_available", sa.Integer(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("license_number", sa.String(length=100), nullable=True),
        sa.Column("licensee_name_address", sa.Text(), nullable=True),
        sa.Column("license_validity", sa.String(length=100), nullable=True),
        sa.Column("license_type", sa.String(length=100), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('buyer', 'seller', 'admin')", name="ck_profiles_role"),
        sa.CheckConstraint(
            "cylinders_available IS NULL OR cylinders_available >= 0",
            name="ck_profiles_stock_non_negative",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    # Candidate scan for nearby search
    op.create_index("ix_profiles_role_active", "profiles", ["role", "active"], unique=False)
    # Admin seller list (newest first)
    op.create_index(
        "ix_profiles_role_created_at", "profiles", ["role", "created_at"], unique=False
    )

    op.create_table(
        "purchases",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("buyer_id", sa.UUID(), nullable=False),
        sa.Column("seller_id", sa.UUID(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_cylinder", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("buyer_email", sa.String(length=255), nullable=True),
        sa.Column("buyer_contact_name", sa.String(length=100), nullable=True),
        sa.Column("seller_name", sa.String(length=100), nullable=True),
        sa.Column("payment_card_last4", sa.String(length=4), nullable=True),
        sa.Column("buyer_address", sa.Text(), nullable=True),
        sa.Column("buyer_latitude", sa.Float(), nullable=True),
        sa.Column("buyer_longitude", sa.Float(), nullable=True),
        sa.Column("purchase_date", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        sa.CheckConstraint("status IN ('completed')", name="ck_purchases_status"),
        sa.ForeignKeyConstraint(["buyer_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["seller_id"], ["profiles.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_purchases_buyer_date", "purchases", ["buyer_id", "purchase_date"], unique=False
    )
    op.create_index(
        "ix_purchases_seller_date", "purchases", ["seller_id", "purchase_date"], unique=False
    )

    op.create_table(
        "activity_log",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("actor_id", sa.UUID(), nullable=False),
        sa.Column("subject_id", sa.UUID(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["actor_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_activity_log_subject_id", "activity_log", ["subject_id"], unique=False
    )
    op.create_index(
        "ix_activity_log_created_at", "activity_log", ["created_at"], unique=False
    )


def downgrade() -> None:
    """Drop marketplace tables."""
    op.drop_index("ix_activity_log_created_at", table_name="activity_log")
    op.drop_index("ix_activity_log_subject_id", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("ix_purchases_seller_date", table_name="purchases")
    op.drop_index("ix_purchases_buyer_date", table_name="purchases")
    op.drop_table("purchases")
    op.drop_index("ix_profiles_role_created_at", table_name="profiles")
    op.drop_index("ix_profiles_role_active", table_name="profiles")
    op.drop_table("profiles")
