"""create schedule day locks

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 00:00:01.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0002"
down_revision = "20261018_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    day_locks = op.create_table(
        "schedule_day_locks",
        sa.Column("day_of_week", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
    )
    op.bulk_insert(day_locks, [{"day_of_week": day, "version": 0} for day in range(1, 8)])


def downgrade() -> None:
    op.drop_table("schedule_day_locks")
