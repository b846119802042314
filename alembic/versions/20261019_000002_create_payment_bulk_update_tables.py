"""Create payment bulk update audit tables

Revision ID: 20261019_000002
Revises: 20261019_000001
Create Date: 2026-10-19

This migration creates the audit trail for bulk payment status changes:
one payment_bulk_updates row per operation and one
payment_bulk_update_items row per affected payment.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000002'
down_revision: Union[str, None] = '20261019_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_STATUSES = ('pending', 'completed', 'failed', 'late', 'cancelled', 'undefined')


def upgrade() -> None:
    """Create the payment_bulk_updates and payment_bulk_update_items tables."""
    op.create_table(
        'payment_bulk_updates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('payments_count', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*PAYMENT_STATUSES, name='payment_bulk_status', native_enum=False, create_constraint=True),
            nullable=False
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'payment_bulk_update_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('bulk_update_id', sa.Integer(), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=False),
        sa.Column('previous_status', sa.String(length=20), nullable=True),
        sa.Column('new_status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['bulk_update_id'],
            ['payment_bulk_updates.id'],
            name='fk_payment_bulk_update_items_bulk_update_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['payment_id'],
            ['payments.id'],
            name='fk_payment_bulk_update_items_payment_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_payment_bulk_update_items_bulk_update_id', 'payment_bulk_update_items', ['bulk_update_id'])
    op.create_index('ix_payment_bulk_update_items_payment_id', 'payment_bulk_update_items', ['payment_id'])


def downgrade() -> None:
    """Drop the bulk update audit tables."""
    op.drop_index('ix_payment_bulk_update_items_payment_id', table_name='payment_bulk_update_items')
    op.drop_index('ix_payment_bulk_update_items_bulk_update_id', table_name='payment_bulk_update_items')
    op.drop_table('payment_bulk_update_items')
    op.drop_table('payment_bulk_updates')
