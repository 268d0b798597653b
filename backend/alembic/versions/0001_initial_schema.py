"""Initial schema: users, products, picos, paletizado stock, activity log

Revision ID: 0001
Revises:
Create Date: 2025-06-02 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers used by Alembic
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE_VALUES = ('administrador', 'armazenista')
CATEGORY_VALUES = ('alta_rotacao', 'baixa_rotacao')


def _enum(bind, values, name):
    # On Postgres the types are created once up front and shared between tables
    if bind.dialect.name == 'postgresql':
        return postgresql.ENUM(*values, name=name, create_type=False)
    return sa.Enum(*values, name=name)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        postgresql.ENUM(*ROLE_VALUES, name='user_role').create(bind, checkfirst=True)
        postgresql.ENUM(*CATEGORY_VALUES, name='category').create(bind, checkfirst=True)
    user_role = _enum(bind, ROLE_VALUES, 'user_role')
    category = _enum(bind, CATEGORY_VALUES, 'category')

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('nickname', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_first_login', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('quantity_bases', sa.Integer(), sa.CheckConstraint('quantity_bases >= 0'), nullable=False),
        sa.Column('units_per_base', sa.Integer(), sa.CheckConstraint('units_per_base > 0'), nullable=False),
        sa.Column('category', category, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_code', 'products', ['code'], unique=True)

    op.create_table(
        'picos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('bases', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('loose_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_units', sa.Integer(), nullable=False),
        sa.Column('tower_location', sa.String(length=2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_picos_id', 'picos', ['id'])
    op.create_index('ix_picos_product_id', 'picos', ['product_id'])

    op.create_table(
        'paletizado_stock',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_paletizado_stock_id', 'paletizado_stock', ['id'])

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('product_code', sa.String(), nullable=False),
        sa.Column('product_description', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('category', category, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_activity_log_id', 'activity_log', ['id'])
    op.create_index('ix_activity_log_type', 'activity_log', ['type'])
    op.create_index('ix_activity_log_created_at', 'activity_log', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('activity_log')
    op.drop_table('paletizado_stock')
    op.drop_table('picos')
    op.drop_table('products')
    op.drop_table('users')
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        postgresql.ENUM(name='category').drop(bind, checkfirst=True)
        postgresql.ENUM(name='user_role').drop(bind, checkfirst=True)
