"""Create board_snapshots table.

Revision ID: 001_board_snapshots
Revises:
Create Date: 2026-10-19

One row per storage key; the whole board lives in the JSON payload column.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_board_snapshots'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'board_snapshots',
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.String(length=40), nullable=False),
        sa.Column('saved_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('key', name=op.f('pk_board_snapshots')),
    )


def downgrade() -> None:
    op.drop_table('board_snapshots')
