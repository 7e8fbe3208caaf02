"""Initial schema - items and inventory audit log

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('sku', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.CheckConstraint('quantity >= 0', name='ck_items_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
    )
    op.create_index('ix_items_category', 'items', ['category'])

    op.create_table(
        'inventory_audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('action_type', sa.String(length=50), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('previous_quantity', sa.Integer(), nullable=False),
        sa.Column('new_quantity', sa.Integer(), nullable=False),
        sa.Column('change_amount', sa.Integer(), nullable=False),
        sa.Column('item_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('value_impact', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('severity', sa.String(length=20), nullable=False),
        sa.Column('triggered_by', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['items.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_inventory_audit_logs_timestamp', 'inventory_audit_logs', ['timestamp'])
    op.create_index('ix_inventory_audit_logs_action_type', 'inventory_audit_logs', ['action_type'])
    op.create_index('ix_inventory_audit_logs_item_id', 'inventory_audit_logs', ['item_id'])
    op.create_index('ix_inventory_audit_logs_severity', 'inventory_audit_logs', ['severity'])


def downgrade() -> None:
    op.drop_index('ix_inventory_audit_logs_severity', table_name='inventory_audit_logs')
    op.drop_index('ix_inventory_audit_logs_item_id', table_name='inventory_audit_logs')
    op.drop_index('ix_inventory_audit_logs_action_type', table_name='inventory_audit_logs')
    op.drop_index('ix_inventory_audit_logs_timestamp', table_name='inventory_audit_logs')
    op.drop_table('inventory_audit_logs')
    op.drop_index('ix_items_category', table_name='items')
    op.drop_table('items')
