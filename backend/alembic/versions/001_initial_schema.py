"""Initial schema: events, occurrences, ticket types, reservations.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_events_id", "events", ["id"])

    op.create_table(
        "event_occurrences",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_time IS NULL OR end_time > start_time", name="check_occurrence_end_after_start"),
    )
    op.create_index("ix_event_occurrences_id", "event_occurrences", ["id"])
    op.create_index("ix_event_occurrences_event_id", "event_occurrences", ["event_id"])
    op.create_index("ix_event_occurrences_event_start", "event_occurrences", ["event_id", "start_time"])

    op.create_table(
        "event_tickets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("kind", sa.String(20), nullable=False, server_default=sa.text("'free'")),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("start_type", sa.String(20), nullable=False, server_default=sa.text("'date'")),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("start_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("start_hours", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("start_minutes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("end_type", sa.String(20), nullable=False, server_default=sa.text("'time_before'")),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("end_hours", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("end_minutes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_per_order", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("max_per_order", sa.Integer(), nullable=True),
        sa.Column("total_capacity", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("kind IN ('free', 'priced')", name="check_ticket_kind"),
        sa.CheckConstraint("start_type IN ('date', 'time_before')", name="check_ticket_start_type"),
        sa.CheckConstraint("end_type IN ('date', 'time_before')", name="check_ticket_end_type"),
        sa.CheckConstraint("min_per_order >= 0", name="check_ticket_min_per_order"),
        sa.CheckConstraint("total_capacity IS NULL OR total_capacity >= 0", name="check_ticket_capacity"),
    )
    op.create_index("ix_event_tickets_id", "event_tickets", ["id"])
    op.create_index("ix_event_tickets_event_id", "event_tickets", ["event_id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("occurrence_id", sa.Integer(), sa.ForeignKey("event_occurrences.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'canceled')", name="check_reservation_status"),
    )
    op.create_index("ix_reservations_id", "reservations", ["id"])
    op.create_index("ix_reservations_occurrence_id", "reservations", ["occurrence_id"])

    op.create_table(
        "reservation_tickets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("reservation_id", sa.Integer(), sa.ForeignKey("reservations.id"), nullable=False),
        sa.Column("ticket_id", sa.Integer(), sa.ForeignKey("event_tickets.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.UniqueConstraint("reservation_id", "ticket_id", name="uq_reservation_ticket"),
        sa.CheckConstraint("quantity > 0", name="check_reservation_ticket_quantity_positive"),
    )
    # The booked-quantity aggregate filters on ticket_id and joins on reservation_id;
    # this index lets it avoid scanning every reservation line.
    op.create_index("ix_reservation_tickets_ticket", "reservation_tickets", ["ticket_id", "reservation_id"])


def downgrade() -> None:
    op.drop_table("reservation_tickets")
    op.drop_table("reservations")
    op.drop_table("event_tickets")
    op.drop_table("event_occurrences")
    op.drop_table("events")
