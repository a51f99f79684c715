"""Initial schema for labrun database.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create instrument, run and run-sample tables."""
    op.create_table(
        "instrument",
        sa.Column("instrument_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("instrument_id"),
    )

    op.create_table(
        "run_instrument",
        sa.Column("run_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("instrument_id", sa.Integer(), nullable=False),
        sa.Column(
            "timestamp",
            sa.DateTime(),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["instrument_id"],
            ["instrument.instrument_id"],
        ),
        sa.PrimaryKeyConstraint("run_id"),
    )

    op.create_table(
        "run_sample",
        sa.Column("sample_id", sa.Integer(), nullable=False),
        sa.Column("run_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["run_instrument.run_id"],
        ),
        sa.PrimaryKeyConstraint("sample_id", "run_id"),
    )

    # Reference instruments
    instrument = sa.table("instrument", sa.column("description", sa.Text()))
    op.bulk_insert(
        instrument,
        [
            {"description": "Instrument 1"},
            {"description": "Instrument 2"},
            {"description": "Instrument 3"},
        ],
    )


def downgrade() -> None:
    """Drop all labrun tables."""
    op.drop_table("run_sample")
    op.drop_table("run_instrument")
    op.drop_table("instrument")
