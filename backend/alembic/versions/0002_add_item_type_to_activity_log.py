"""Add item_type to activity_log

Revision ID: 0002
Revises: 0001
Create Date: 2025-07-14 16:40:05.902117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Add as nullable, backfill existing rows, then enforce NOT NULL
    op.add_column('activity_log', sa.Column('item_type', sa.String(), nullable=True))
    op.execute("UPDATE activity_log SET item_type = 'paletizado' WHERE item_type IS NULL")
    with op.batch_alter_table('activity_log') as batch_op:
        batch_op.alter_column('item_type', existing_type=sa.String(), nullable=False)


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('activity_log') as batch_op:
        batch_op.drop_column('item_type')
