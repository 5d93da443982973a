"""Initial schema: appointments and sequence counters.

Revision ID: 001
Revises:
Create Date: 2026-01-01 00:00:00.000000

Creates:
- sequence_counters: named counters for sequence identifiers
- appointments: bookings with one unique constraint per party and slot
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create appointment tables."""

    # ========================================================================
    # SEQUENCE COUNTERS
    # ========================================================================

    op.create_table(
        "sequence_counters",
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("name", name="pk_sequence_counters"),
    )

    # ========================================================================
    # APPOINTMENTS
    # ========================================================================

    op.create_table(
        "appointments",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("appointment_id", sa.Integer(), nullable=False),
        sa.Column("client_name", sa.String(200), nullable=False),
        sa.Column("provider_name", sa.String(200), nullable=False),
        sa.Column("service", sa.String(200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.Time(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_appointments"),
        # No status filter: cancelled appointments keep their slot
        sa.UniqueConstraint(
            "client_name", "date", "time", name="uq_appointments_client_slot"
        ),
        sa.UniqueConstraint(
            "provider_name", "date", "time", name="uq_appointments_provider_slot"
        ),
    )
    op.create_index(
        "ix_appointments_appointment_id",
        "appointments",
        ["appointment_id"],
        unique=True,
    )
    op.create_index("ix_appointments_date", "appointments", ["date"])


def downgrade() -> None:
    """Drop appointment tables."""
    op.drop_index("ix_appointments_date", table_name="appointments")
    op.drop_index("ix_appointments_appointment_id", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("sequence_counters")
