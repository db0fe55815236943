"""Create votes table keyed by voter name

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # voter_name is the primary key so a second vote replaces the first
    op.create_table('votes',
        sa.Column('voter_name', sa.String(length=255), nullable=False),
        sa.Column('restaurant_name', sa.String(length=255), nullable=False),
        sa.Column('voted_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('voter_name')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('votes')
