"""One paletizado_stock row per product; server-side sessions table

Revision ID: 0003
Revises: 0002
Create Date: 2025-09-03 09:27:52.611480

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '0003'
down_revision: Union[str, Sequence[str], None] = '0002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Fold duplicate stock rows into the oldest row of each product before adding the constraint
    op.execute(
        """
        UPDATE paletizado_stock
        SET quantity = (
            SELECT SUM(s.quantity) FROM paletizado_stock s
            WHERE s.product_id = paletizado_stock.product_id
        )
        WHERE id IN (SELECT MIN(id) FROM paletizado_stock GROUP BY product_id)
        """
    )
    op.execute(
        """
        DELETE FROM paletizado_stock
        WHERE id NOT IN (SELECT MIN(id) FROM paletizado_stock GROUP BY product_id)
        """
    )
    with op.batch_alter_table('paletizado_stock') as batch_op:
        batch_op.create_unique_constraint('uq_paletizado_stock_product_id', ['product_id'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_expires_at', 'sessions', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('sessions')
    with op.batch_alter_table('paletizado_stock') as batch_op:
        batch_op.drop_constraint('uq_paletizado_stock_product_id', type_='unique')
