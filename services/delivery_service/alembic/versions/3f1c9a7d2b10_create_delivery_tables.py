"""create_delivery_tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-17 09:12:44.118230
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a7d2b10'
down_revision = None
branch_labels = None
depends_on = None

DELIVERY_STATUSES = ('pending_payment', 'paid', 'assigned', 'in_transit', 'delivered', 'cancelled')
DELIVERY_TYPES = ('standard', 'express', 'same_day')


def upgrade() -> None:
    op.create_table(
        'vendors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('contact_email', sa.String(length=250), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_vendors')),
        sa.UniqueConstraint('name', name=op.f('uq_vendors_name')),
    )
    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_stores')),
        sa.UniqueConstraint('name', name=op.f('uq_stores_name')),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('weight', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('price >= 0', name=op.f('ck_products_non_negative_price')),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], name=op.f('fk_products_vendor_id_vendors'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_products')),
    )
    op.create_index(op.f('ix_products_vendor_id'), 'products', ['vendor_id'], unique=False)
    op.create_table(
        'store_products',
        sa.Column('store_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity >= 0', name=op.f('ck_store_products_non_negative_stock')),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name=op.f('fk_store_products_product_id_products'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name=op.f('fk_store_products_store_id_stores'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('store_id', 'product_id', name=op.f('pk_store_products')),
    )
    op.create_table(
        'deliveries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('vendor_id', sa.Integer(), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('status', sa.Enum(*DELIVERY_STATUSES, name='delivery_status_enum'), nullable=False),
        sa.Column('type', sa.Enum(*DELIVERY_TYPES, name='delivery_type_enum'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('paid_amount', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('driver_id', sa.String(length=100), nullable=True),
        sa.Column('gps_tracker_id', sa.String(length=100), nullable=True),
        sa.Column('from_latitude', sa.Float(), nullable=True),
        sa.Column('from_longitude', sa.Float(), nullable=True),
        sa.Column('to_latitude', sa.Float(), nullable=True),
        sa.Column('to_longitude', sa.Float(), nullable=True),
        sa.Column('current_latitude', sa.Float(), nullable=True),
        sa.Column('current_longitude', sa.Float(), nullable=True),
        sa.Column('last_location_update', sa.DateTime(timezone=True), nullable=True),
        sa.Column('tracking_notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['store_id'], ['stores.id'], name=op.f('fk_deliveries_store_id_stores'), ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], name=op.f('fk_deliveries_vendor_id_vendors'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_deliveries')),
    )
    op.create_index(op.f('ix_deliveries_status'), 'deliveries', ['status'], unique=False)
    op.create_index(op.f('ix_deliveries_store_id'), 'deliveries', ['store_id'], unique=False)
    op.create_index(op.f('ix_deliveries_vendor_id'), 'deliveries', ['vendor_id'], unique=False)
    op.create_table(
        'delivery_products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('delivery_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.CheckConstraint('quantity > 0', name=op.f('ck_delivery_products_positive_quantity')),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id'], name=op.f('fk_delivery_products_delivery_id_deliveries'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name=op.f('fk_delivery_products_product_id_products'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_delivery_products')),
    )
    op.create_index(op.f('ix_delivery_products_delivery_id'), 'delivery_products', ['delivery_id'], unique=False)
    op.create_table(
        'delivery_location_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('delivery_id', sa.Integer(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('speed', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id'], name=op.f('fk_delivery_location_history_delivery_id_deliveries'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_delivery_location_history')),
    )
    op.create_index(op.f('ix_delivery_location_history_delivery_id'), 'delivery_location_history', ['delivery_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_delivery_location_history_delivery_id'), table_name='delivery_location_history')
    op.drop_table('delivery_location_history')
    op.drop_index(op.f('ix_delivery_products_delivery_id'), table_name='delivery_products')
    op.drop_table('delivery_products')
    op.drop_index(op.f('ix_deliveries_vendor_id'), table_name='deliveries')
    op.drop_index(op.f('ix_deliveries_store_id'), table_name='deliveries')
    op.drop_index(op.f('ix_deliveries_status'), table_name='deliveries')
    op.drop_table('deliveries')
    sa.Enum(name='delivery_type_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='delivery_status_enum').drop(op.get_bind(), checkfirst=True)
    op.drop_table('store_products')
    op.drop_index(op.f('ix_products_vendor_id'), table_name='products')
    op.drop_table('products')
    op.drop_table('stores')
    op.drop_table('vendors')
