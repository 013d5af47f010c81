"""Initial schema: enums and the six core tables.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


ENUMS = {
    "user_role": ("customer", "driver", "admin"),
    "driver_status": ("pending", "approved", "rejected"),
    "ride_status": ("requested", "accepted", "in_progress", "completed", "cancelled"),
    "vehicle_type": ("mini", "sedan", "suv"),
    "withdrawal_status": ("pending", "approved", "rejected"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # ── profiles ──────────────────────────────────────────────────────
    op.create_table(
        "profiles",
        _id(),
        sa.Column("user_id", sa.String(36), unique=True, nullable=False),
        sa.Column("full_name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("avatar_url", sa.Text, nullable=True),
        sa.Column(
            "role", _enum("user_role"), server_default="customer", nullable=False
        ),
        *_timestamps(),
    )
    op.create_index("idx_profiles_role", "profiles", ["role"])

    # ── drivers ───────────────────────────────────────────────────────
    op.create_table(
        "drivers",
        _id(),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("profiles.user_id"),
            nullable=False,
        ),
        sa.Column("vehicle_type", _enum("vehicle_type"), nullable=False),
        sa.Column("vehicle_model", sa.String(120), nullable=False),
        sa.Column("vehicle_plate", sa.String(32), nullable=False),
        sa.Column("license_number", sa.String(64), nullable=False),
        sa.Column("rc_number", sa.String(64), nullable=False),
        sa.Column("license_document_url", sa.Text, nullable=True),
        sa.Column("rc_document_url", sa.Text, nullable=True),
        sa.Column("vehicle_photo_url", sa.Text, nullable=True),
        sa.Column(
            "status",
            _enum("driver_status"),
            server_default="pending",
            nullable=False,
        ),
        sa.Column(
            "is_available", sa.Boolean, server_default=sa.false(), nullable=False
        ),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("total_rides", sa.Integer, server_default="0"),
        sa.Column("current_location", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_drivers_user", "drivers", ["user_id"])
    op.create_index("idx_drivers_status", "drivers", ["status"])
    op.create_index("idx_drivers_available", "drivers", ["is_available"])

    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        _id(),
        sa.Column(
            "customer_id",
            sa.String(36),
            sa.ForeignKey("profiles.user_id"),
            nullable=False,
        ),
        sa.Column(
            "driver_id",
            sa.String(36),
            sa.ForeignKey("profiles.user_id"),
            nullable=True,
        ),
        sa.Column("pickup_location", sa.Text, nullable=False),
        sa.Column("dropoff_location", sa.Text, nullable=False),
        sa.Column("pickup_coordinates", sa.Text, nullable=True),
        sa.Column("dropoff_coordinates", sa.Text, nullable=True),
        sa.Column("distance_km", sa.Float, nullable=True),
        sa.Column("vehicle_type", _enum("vehicle_type"), nullable=False),
        sa.Column(
            "status",
            _enum("ride_status"),
            server_default="requested",
            nullable=False,
        ),
        sa.Column("estimated_fare", sa.Float, nullable=True),
        sa.Column("final_fare", sa.Float, nullable=True),
        sa.Column("customer_rating", sa.Float, nullable=True),
        sa.Column("driver_rating", sa.Float, nullable=True),
        sa.Column(
            "requested_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_customer", "rides", ["customer_id"])
    op.create_index("idx_rides_driver", "rides", ["driver_id"])

    # ── wallets ───────────────────────────────────────────────────────
    op.create_table(
        "wallets",
        _id(),
        sa.Column(
            "driver_id",
            sa.String(36),
            sa.ForeignKey("profiles.user_id"),
            nullable=False,
        ),
        sa.Column("balance", sa.Float, server_default="0", nullable=False),
        sa.Column("total_earned", sa.Float, server_default="0", nullable=False),
        sa.Column("total_withdrawn", sa.Float, server_default="0", nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_wallets_driver", "wallets", ["driver_id"])

    # ── wallet_transactions ───────────────────────────────────────────
    op.create_table(
        "wallet_transactions",
        _id(),
        sa.Column(
            "wallet_id", sa.String(36), sa.ForeignKey("wallets.id"), nullable=False
        ),
        sa.Column("ride_id", sa.String(36), sa.ForeignKey("rides.id"), nullable=True),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_wallet_transactions_wallet", "wallet_transactions", ["wallet_id"]
    )

    # ── withdrawals ───────────────────────────────────────────────────
    op.create_table(
        "withdrawals",
        _id(),
        sa.Column(
            "driver_id",
            sa.String(36),
            sa.ForeignKey("profiles.user_id"),
            nullable=False,
        ),
        sa.Column(
            "wallet_id", sa.String(36), sa.ForeignKey("wallets.id"), nullable=False
        ),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column(
            "status",
            _enum("withdrawal_status"),
            server_default="pending",
            nullable=False,
        ),
        sa.Column("bank_account_number", sa.String(34), nullable=True),
        sa.Column("bank_ifsc", sa.String(11), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "requested_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_withdrawals_driver", "withdrawals", ["driver_id"])
    op.create_index("idx_withdrawals_status", "withdrawals", ["status"])


def downgrade() -> None:
    op.drop_table("withdrawals")
    op.drop_table("wallet_transactions")
    op.drop_table("wallets")
    op.drop_table("rides")
    op.drop_table("drivers")
    op.drop_table("profiles")
    for name in reversed(list(ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
