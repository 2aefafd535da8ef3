"""initial storefront schema

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4f1c2a9e7b10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('modified_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('username', sa.String(length=150), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column(
            'role',
            sa.String(length=20),
            server_default='user',
            nullable=False,
            comment='User roles: admin, merchant, user',
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'collection',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', sa.String(length=50), nullable=False),
        sa.Column('visible', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['user.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_collection_owner_id'), 'collection', ['owner_id'], unique=False)
    op.create_index(op.f('ix_collection_slug'), 'collection', ['slug'], unique=False)

    op.create_table(
        'category',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('collection_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collection_id'], ['collection.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_category_collection_id'), 'category', ['collection_id'], unique=False)

    op.create_table(
        'product',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('collection_id', sa.String(length=50), nullable=False),
        sa.Column('category_id', sa.String(length=50), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('variants', sa.JSON(), nullable=False),
        sa.Column('variant_prices', sa.JSON(), nullable=False),
        sa.Column('blank_code', sa.String(length=100), nullable=True),
        sa.Column('technique', sa.String(length=100), nullable=True),
        sa.Column('note_for_supplier', sa.Text(), nullable=True),
        sa.Column('design_files', sa.JSON(), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('visible', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['category.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['collection_id'], ['collection.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_product_category_id'), 'product', ['category_id'], unique=False)
    op.create_index(op.f('ix_product_collection_id'), 'product', ['collection_id'], unique=False)
    op.create_index(op.f('ix_product_slug'), 'product', ['slug'], unique=False)

    op.create_table(
        'collection_access',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('collection_id', sa.String(length=50), nullable=False),
        sa.Column('user_id', sa.String(length=50), nullable=False),
        sa.Column('access_type', sa.String(length=10), nullable=False, comment='Access types: view, edit'),
        sa.Column('granted_by', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collection_id'], ['collection.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['granted_by'], ['user.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collection_id', 'user_id', name='uq_collection_access_collection_user'),
    )
    op.create_index(op.f('ix_collection_access_collection_id'), 'collection_access', ['collection_id'], unique=False)
    op.create_index(op.f('ix_collection_access_user_id'), 'collection_access', ['user_id'], unique=False)

    op.create_table(
        'order',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('wallet_address', sa.String(length=100), nullable=False),
        sa.Column('product_id', sa.String(length=50), nullable=True),
        sa.Column('collection_id', sa.String(length=50), nullable=True),
        sa.Column('category_id', sa.String(length=50), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('variant_selections', sa.JSON(), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            comment='Order statuses: pending_payment, pending, confirmed, shipped, delivered, cancelled',
        ),
        sa.Column('product_snapshot', sa.JSON(), nullable=False),
        sa.Column('collection_snapshot', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['category.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['collection_id'], ['collection.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_order_collection_id'), 'order', ['collection_id'], unique=False)
    op.create_index(op.f('ix_order_product_id'), 'order', ['product_id'], unique=False)
    op.create_index(op.f('ix_order_wallet_address'), 'order', ['wallet_address'], unique=False)


def downgrade() -> None:
    op.drop_table('order')
    op.drop_table('collection_access')
    op.drop_table('product')
    op.drop_table('category')
    op.drop_table('collection')
    op.drop_table('user')
