"""ledger schema: partners, orders, itemized payments, refunds and returns

Revision ID: a3c91e7d2b10
Revises:
Create Date: 2026-10-12 10:24:51.381204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a3c91e7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = ('DRAFT', 'APPROVED', 'PARTIALLY_PAID', 'PAID')


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'business_partners',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        sa.Column('partner_code', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'BLOCKED', name='partnerstatus'), nullable=False),
        sa.Column('is_vendor', sa.Boolean(), nullable=False),
        sa.Column('is_customer', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'partner_code', name='_tenant_partner_code_uc'),
    )
    op.create_index('ix_business_partners_id', 'business_partners', ['id'])
    op.create_index('ix_business_partners_tenant_id', 'business_partners', ['tenant_id'])
    op.create_index('ix_business_partners_partner_code', 'business_partners', ['partner_code'])

    op.create_table(
        'sales_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('so_number', sa.Integer(), nullable=True),
        sa.Column('bill_no', sa.String(), nullable=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('business_partners.id'), nullable=False),
        sa.Column('order_date', sa.Date(), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 3), nullable=False),
        sa.Column('total_amount_paid', sa.Numeric(10, 3), server_default='0.0', nullable=False),
        sa.Column('status', sa.Enum(*ORDER_STATUSES, name='salesorderstatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'so_number', name='_tenant_so_number_uc'),
    )
    op.create_index('ix_sales_orders_id', 'sales_orders', ['id'])
    op.create_index('ix_sales_orders_so_number', 'sales_orders', ['so_number'])
    op.create_index('ix_sales_orders_tenant_id', 'sales_orders', ['tenant_id'])

    op.create_table(
        'sales_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sales_order_id', sa.Integer(), sa.ForeignKey('sales_orders.id'), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 3), nullable=False),
        sa.Column('payment_mode', sa.String(), nullable=True),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_sales_payments_id', 'sales_payments', ['id'])
    op.create_index('ix_sales_payments_tenant_id', 'sales_payments', ['tenant_id'])

    op.create_table(
        'sales_refunds',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sales_order_id', sa.Integer(), sa.ForeignKey('sales_orders.id'), nullable=False),
        sa.Column('refund_number', sa.String(), nullable=False),
        sa.Column('refund_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 3), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_sales_refunds_id', 'sales_refunds', ['id'])
    op.create_index('ix_sales_refunds_refund_number', 'sales_refunds', ['refund_number'])
    op.create_index('ix_sales_refunds_tenant_id', 'sales_refunds', ['tenant_id'])

    op.create_table(
        'purchase_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('po_number', sa.Integer(), nullable=True),
        sa.Column('bill_no', sa.String(), nullable=True),
        sa.Column('vendor_id', sa.Integer(), sa.ForeignKey('business_partners.id'), nullable=False),
        sa.Column('order_date', sa.Date(), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 3), nullable=False),
        sa.Column('total_amount_paid', sa.Numeric(10, 3), server_default='0.0', nullable=False),
        sa.Column('status', sa.Enum(*ORDER_STATUSES, name='purchaseorderstatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'po_number', name='_tenant_po_number_uc'),
    )
    op.create_index('ix_purchase_orders_id', 'purchase_orders', ['id'])
    op.create_index('ix_purchase_orders_po_number', 'purchase_orders', ['po_number'])
    op.create_index('ix_purchase_orders_tenant_id', 'purchase_orders', ['tenant_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_order_id', sa.Integer(), sa.ForeignKey('purchase_orders.id'), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 3), nullable=False),
        sa.Column('payment_mode', sa.String(), nullable=True),
        sa.Column('reference_number', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_payments_id', 'payments', ['id'])
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])

    op.create_table(
        'purchase_returns',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_order_id', sa.Integer(), sa.ForeignKey('purchase_orders.id'), nullable=False),
        sa.Column('return_number', sa.String(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 3), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('tenant_id', sa.String(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_purchase_returns_id', 'purchase_returns', ['id'])
    op.create_index('ix_purchase_returns_return_number', 'purchase_returns', ['return_number'])
    op.create_index('ix_purchase_returns_tenant_id', 'purchase_returns', ['tenant_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('purchase_returns')
    op.drop_table('payments')
    op.drop_table('purchase_orders')
    op.drop_table('sales_refunds')
    op.drop_table('sales_payments')
    op.drop_table('sales_orders')
    op.drop_table('business_partners')
    sa.Enum(name='purchaseorderstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='salesorderstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='partnerstatus').drop(op.get_bind(), checkfirst=True)
