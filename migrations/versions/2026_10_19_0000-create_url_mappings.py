"""Create url_mappings table

Revision ID: 001_url_mappings
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_url_mappings'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the url_mappings table.

    The unique index on short_code is what guarantees uniqueness under
    concurrent inserts; the application never relies on its own check alone.
    """
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = inspector.get_table_names()

    if 'url_mappings' in existing_tables:
        return

    op.create_table(
        'url_mappings',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('short_code', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_url_mappings_short_code',
        'url_mappings',
        ['short_code'],
        unique=True
    )

    op.create_index(
        'ix_url_mappings_created_at',
        'url_mappings',
        ['created_at']
    )


def downgrade() -> None:
    """Drop the url_mappings table and its indexes."""
    op.drop_index('ix_url_mappings_created_at', table_name='url_mappings')
    op.drop_index('ix_url_mappings_short_code', table_name='url_mappings')
    op.drop_table('url_mappings')
