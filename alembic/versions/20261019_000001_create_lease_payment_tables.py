"""Create property, tenant, lease and payment tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

This migration creates the tables backing leases and their payment schedule,
including the partial unique index that keeps generated payments unique per
lease, due date and payment type.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_STATUSES = ('pending', 'completed', 'failed', 'late', 'cancelled', 'undefined')
PAYMENT_TYPES = ('rent', 'deposit', 'agency_fee', 'other')


def upgrade() -> None:
    """Create the properties, tenants, leases and payments tables."""
    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('agency_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('agency_fees', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='available'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_agency_id', 'properties', ['agency_id'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('agency_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_agency_id', 'tenants', ['agency_id'])

    op.create_table(
        'leases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('payment_start_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('security_deposit', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('payment_frequency', sa.String(length=16), nullable=False, server_default='monthly'),
        sa.Column('payment_day', sa.Integer(), nullable=True),
        sa.Column('lease_type', sa.String(length=50), nullable=True),
        sa.Column('special_conditions', sa.Text(), nullable=True),
        sa.Column('has_renewal_option', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('signed_by_tenant', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('signed_by_owner', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['properties.id'],
            name='fk_leases_property_id',
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id'],
            ['tenants.id'],
            name='fk_leases_tenant_id',
        ),
    )
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lease_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column(
            'status',
            sa.Enum(*PAYMENT_STATUSES, name='payment_status', native_enum=False, create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column(
            'payment_type',
            sa.Enum(*PAYMENT_TYPES, name='payment_type', native_enum=False, create_constraint=True),
            nullable=False,
            server_default='rent'
        ),
        sa.Column('is_auto_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('processed_by', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['lease_id'],
            ['leases.id'],
            name='fk_payments_lease_id',
            ondelete='CASCADE'
        ),
    )

    # Create indexes for common queries
    op.create_index('ix_payments_lease_id', 'payments', ['lease_id'])
    op.create_index('ix_payments_due_date', 'payments', ['due_date'])
    op.create_index('ix_payments_status', 'payments', ['status'])
    op.create_index(
        'uq_payments_auto_schedule',
        'payments',
        ['lease_id', 'due_date', 'payment_type'],
        unique=True,
        sqlite_where=sa.text('is_auto_generated = 1'),
        mssql_where=sa.text('is_auto_generated = 1'),
        postgresql_where=sa.text('is_auto_generated'),
    )


def downgrade() -> None:
    """Drop the payments, leases, tenants and properties tables."""
    op.drop_index('uq_payments_auto_schedule', table_name='payments')
    op.drop_index('ix_payments_status', table_name='payments')
    op.drop_index('ix_payments_due_date', table_name='payments')
    op.drop_index('ix_payments_lease_id', table_name='payments')
    op.drop_table('payments')

    op.drop_index('ix_leases_tenant_id', table_name='leases')
    op.drop_index('ix_leases_property_id', table_name='leases')
    op.drop_table('leases')

    op.drop_index('ix_tenants_agency_id', table_name='tenants')
    op.drop_table('tenants')

    op.drop_index('ix_properties_agency_id', table_name='properties')
    op.drop_table('properties')
