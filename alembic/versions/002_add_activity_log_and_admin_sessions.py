"""Add activity log and admin sessions

Revision ID: 002_activity_sessions
Revises: 001_log_entries
Create Date: 2026-10-18

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_activity_sessions'
down_revision: Union[str, None] = '001_log_entries'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = inspector.get_table_names()

    if 'activity_log' not in existing:
        # target_id has no foreign key: entries outlive deleted log entries
        op.create_table(
            'activity_log',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('action', sa.String(length=50), nullable=False),
            sa.Column('target_id', sa.Integer(), nullable=True),
            sa.Column('admin_user', sa.String(length=255), nullable=False),
            sa.Column('details', sa.JSON(), nullable=True),
            sa.Column('ip_address', sa.String(length=255), nullable=True),
            sa.Column(
                'timestamp',
                sa.DateTime(timezone=True),
                server_default=sa.text('CURRENT_TIMESTAMP'),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_activity_log_id'), 'activity_log', ['id'], unique=False)
        op.create_index(op.f('ix_activity_log_timestamp'), 'activity_log', ['timestamp'], unique=False)
        op.create_index(op.f('ix_activity_log_admin_user'), 'activity_log', ['admin_user'], unique=False)

    if 'admin_sessions' not in existing:
        op.create_table(
            'admin_sessions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.String(length=128), nullable=False),
            sa.Column('username', sa.String(length=255), nullable=False),
            sa.Column('ip_address', sa.String(length=255), nullable=True),
            sa.Column('user_agent', sa.Text(), nullable=True),
            sa.Column('login_time', sa.DateTime(timezone=True), nullable=False),
            sa.Column('last_activity', sa.DateTime(timezone=True), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_admin_sessions_id'), 'admin_sessions', ['id'], unique=False)
        op.create_index(op.f('ix_admin_sessions_session_id'), 'admin_sessions', ['session_id'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_admin_sessions_session_id'), table_name='admin_sessions')
    op.drop_index(op.f('ix_admin_sessions_id'), table_name='admin_sessions')
    op.drop_table('admin_sessions')
    op.drop_index(op.f('ix_activity_log_admin_user'), table_name='activity_log')
    op.drop_index(op.f('ix_activity_log_timestamp'), table_name='activity_log')
    op.drop_index(op.f('ix_activity_log_id'), table_name='activity_log')
    op.drop_table('activity_log')
