"""initial finance schema

Revision ID: 20261001_initial
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20261001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _owner():
    return sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)


def _timestamp(name: str, nullable: bool = False):
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=nullable)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        _uuid_pk(),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(50), nullable=True),
        sa.Column('last_name', sa.String(50), nullable=True),
        sa.Column('phone_number', sa.String(32), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('profile_image', sa.String(500), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_superadmin', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('auth_provider', sa.String(), nullable=True),
        sa.Column('external_subject', sa.String(), nullable=True),
        _timestamp('created_at', nullable=True),
        _timestamp('updated_at', nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_external_subject'), 'users', ['external_subject'], unique=True)

    op.create_table(
        'transactions',
        _uuid_pk(),
        _owner(),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='expense'),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('subcategory', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('account_id', sa.String(100), nullable=True),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('location', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('receipt', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_manual', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_transactions_user_id_date', 'transactions', ['user_id', 'date'])
    op.create_index('idx_transactions_user_id_category', 'transactions', ['user_id', 'category'])

    op.create_table(
        'budgets',
        _uuid_pk(),
        _owner(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('period', sa.String(20), nullable=False, server_default='monthly'),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('categories', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_budgets_user_id_created_at', 'budgets', ['user_id', 'created_at'])

    op.create_table(
        'goals',
        _uuid_pk(),
        _owner(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(30), nullable=False, server_default='savings'),
        sa.Column('target_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('current_amount', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('auto_contribute', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('milestones', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_goals_user_id_status', 'goals', ['user_id', 'status'])

    op.create_table(
        'investments',
        _uuid_pk(),
        _owner(),
        sa.Column('symbol', sa.String(20), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='stock'),
        sa.Column('quantity', sa.Numeric(20, 8), nullable=False),
        sa.Column('purchase_price', sa.Numeric(20, 6), nullable=False),
        sa.Column('current_price', sa.Numeric(20, 6), nullable=False),
        sa.Column('total_value', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('gain_loss', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('gain_loss_percentage', sa.Numeric(12, 4), nullable=False, server_default='0'),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        _timestamp('last_updated'),
        _timestamp('created_at'),
    )
    op.create_index('idx_investments_user_id_symbol', 'investments', ['user_id', 'symbol'])

    op.create_table(
        'notifications',
        _uuid_pk(),
        _owner(),
        sa.Column('type', sa.String(50), nullable=False, server_default='general'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('read_at', sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp('created_at'),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index('idx_notifications_user_id_created_at', 'notifications', ['user_id', 'created_at'])
    op.create_index('idx_notifications_user_id_is_read', 'notifications', ['user_id', 'is_read'])
    op.create_index('idx_notifications_expires_at', 'notifications', ['expires_at'])

    op.create_table(
        'user_settings',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('language', sa.String(10), nullable=False, server_default='en'),
        sa.Column('theme', sa.String(10), nullable=False, server_default='light'),
        sa.Column('notifications', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('privacy', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('security', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'audit_logs',
        _uuid_pk(),
        sa.Column('actor_user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=True),
        sa.Column('target_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _timestamp('created_at'),
    )
    op.create_index('ix_audit_logs_actor_user_id_created_at', 'audit_logs', ['actor_user_id', 'created_at'])
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_audit_logs_action_type', table_name='audit_logs')
    op.drop_index('ix_audit_logs_actor_user_id_created_at', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_table('user_settings')
    op.drop_index('idx_notifications_expires_at', table_name='notifications')
    op.drop_index('idx_notifications_user_id_is_read', table_name='notifications')
    op.drop_index('idx_notifications_user_id_created_at', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('idx_investments_user_id_symbol', table_name='investments')
    op.drop_table('investments')
    op.drop_index('idx_goals_user_id_status', table_name='goals')
    op.drop_table('goals')
    op.drop_index('idx_budgets_user_id_created_at', table_name='budgets')
    op.drop_table('budgets')
    op.drop_index('idx_transactions_user_id_category', table_name='transactions')
    op.drop_index('idx_transactions_user_id_date', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index(op.f('ix_users_external_subject'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
