"""create rental payment tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-12 09:14:02.418311
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


unit_status_enum = sa.Enum("vacant", "occupied", name="unitstatus", native_enum=False)
payment_method_enum = sa.Enum(
    "SEPA_MANDATE", "MANUAL", name="paymentmethod", native_enum=False
)
payment_status_enum = sa.Enum(
    "pending", "paid", "late", "failed", name="paymentstatus", native_enum=False
)
payment_provider_enum = sa.Enum(
    "MOCK", "SEPA", "STRIPE", name="paymentprovider", native_enum=False
)
asset_type_enum = sa.Enum(
    "boiler", "ac", "extinguisher", "other", name="assettype", native_enum=False
)
notification_type_enum = sa.Enum(
    "payment-reminder", name="notificationtype", native_enum=False
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "owners",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_owners_email", "owners", ["email"])

    op.create_table(
        "units",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "owner_id",
            sa.String(length=64),
            sa.ForeignKey("owners.id", ondelete="CASCADE"),
        ),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("rooms", sa.Integer(), nullable=True),
        sa.Column("m2", sa.Numeric(8, 2), nullable=True),
        sa.Column("rent_ask", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", unit_status_enum, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_units_owner_id", "units", ["owner_id"])

    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "owner_id",
            sa.String(length=64),
            sa.ForeignKey("owners.id", ondelete="CASCADE"),
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_tenants_owner_id", "tenants", ["owner_id"])

    op.create_table(
        "leases",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "unit_id",
            sa.String(length=64),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
        ),
        sa.Column(
            "tenant_id",
            sa.String(length=64),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_day", sa.Integer(), nullable=False),
        sa.Column("payment_method", payment_method_enum, nullable=False),
        sa.Column("mandate_ref", sa.String(length=64), nullable=True),
        sa.Column("tenant_email", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_leases_unit_id", "leases", ["unit_id"])
    op.create_index("ix_leases_tenant_id", "leases", ["tenant_id"])
    op.create_index("ix_leases_due_day", "leases", ["due_day"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "lease_id",
            sa.String(length=64),
            sa.ForeignKey("leases.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", payment_status_enum, nullable=False),
        sa.Column("provider", payment_provider_enum, nullable=True),
        sa.Column("tx_ref", sa.String(length=255), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("lease_id", "due_date", name="uq_payment_lease_due_date"),
    )
    op.create_index("ix_payments_status", "payments", ["status"])
    op.create_index("ix_payments_lease_due", "payments", ["lease_id", "due_date"])

    op.create_table(
        "assets",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "unit_id",
            sa.String(length=64),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
        ),
        sa.Column("type", asset_type_enum, nullable=False),
        sa.Column("next_certification_date", sa.Date(), nullable=True),
        sa.Column("provider_pref", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_assets_unit_id", "assets", ["unit_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("type", notification_type_enum, nullable=False),
        sa.Column("lease_id", sa.String(length=64), nullable=False),
        sa.Column("payment_id", sa.String(length=64), nullable=False),
        sa.Column("to", sa.String(length=255), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notifications_lease_id", "notifications", ["lease_id"])
    op.create_index("ix_notifications_payment_id", "notifications", ["payment_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("notifications")
    op.drop_table("assets")
    op.drop_table("payments")
    op.drop_table("leases")
    op.drop_table("tenants")
    op.drop_table("units")
    op.drop_table("owners")
