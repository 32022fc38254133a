"""orders, admin users and audit log

Revision ID: 0001_initial_orders
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

revision = '0001_initial_orders'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    bind = op.get_bind()
    insp = inspect(bind)

    if not insp.has_table('admin_users'):
        op.create_table('admin_users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('email', sa.String(length=128), nullable=False, unique=True),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
        )
        op.create_index('ix_admin_users_email', 'admin_users', ['email'])

    if not insp.has_table('orders'):
        op.create_table('orders',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('customer_name', sa.String(length=128), nullable=False),
            sa.Column('contact', sa.String(length=128), nullable=False),
            sa.Column('file_name', sa.String(length=255), nullable=False),
            sa.Column('file_url', sa.Text(), nullable=True),
            sa.Column('file_path', sa.String(length=512), nullable=True),
            sa.Column('file_expires_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('file_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('payment_proof_url', sa.Text(), nullable=True),
            sa.Column('payment_proof_path', sa.String(length=512), nullable=True),
            sa.Column('payment_proof_expires_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('payment_proof_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('color_mode', sa.String(length=8), nullable=False),
            sa.Column('copies', sa.Integer(), nullable=False),
            sa.Column('pages', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('paper_size', sa.String(length=8), nullable=False, server_default='A4'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
            sa.Column('estimated_time', sa.Integer(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.CheckConstraint('copies > 0', name='ck_orders_copies_positive'),
            sa.CheckConstraint('pages > 0', name='ck_orders_pages_positive'),
        )
        for name, cols in [
            ('ix_orders_customer_name', ['customer_name']),
            ('ix_orders_status', ['status']),
            ('ix_orders_created_at', ['created_at']),
            ('ix_orders_file_expires_at', ['file_expires_at']),
            ('ix_orders_payment_proof_expires_at', ['payment_proof_expires_at']),
        ]:
            op.create_index(name, 'orders', cols)

    if not insp.has_table('audit_logs'):
        op.create_table('audit_logs',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('actor_user_id', sa.Integer(), nullable=False),
            sa.Column('action', sa.String(length=64), nullable=False),
            sa.Column('entity', sa.String(length=64), nullable=True),
            sa.Column('entity_id', sa.String(length=64), nullable=True),
            sa.Column('meta', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
        )
        op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
        op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
        op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])

def downgrade():
    op.drop_table('audit_logs')
    op.drop_table('orders')
    op.drop_table('admin_users')
