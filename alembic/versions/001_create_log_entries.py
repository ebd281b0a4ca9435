"""Create log entries table

Revision ID: 001_log_entries
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_log_entries'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COUNTER_COLUMNS = (
    'attendees_batch1',
    'attendees_batch2',
    'dropped_links',
    'recruits',
    'nicknames_set',
    'game_handled',
    'attendees_total',
    'dropped_links_total',
    'recruits_total',
    'nicknames_set_total',
    'game_handled_total',
)


def upgrade() -> None:
    # Skip if the table already exists (e.g. SQLite DB created by create_all())
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if 'log_entries' in inspector.get_table_names():
        return

    # Use SQL-standard CURRENT_TIMESTAMP so it works on SQLite and Postgres
    op.create_table(
        'log_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('position', sa.Text(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        *[
            sa.Column(name, sa.Integer(), nullable=False, server_default='0')
            for name in COUNTER_COLUMNS
        ],
        sa.Column('ip_address', sa.String(length=255), nullable=True),
        sa.Column('mac_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_log_entries_id'), 'log_entries', ['id'], unique=False)
    op.create_index(op.f('ix_log_entries_name'), 'log_entries', ['name'], unique=False)
    op.create_index(op.f('ix_log_entries_position'), 'log_entries', ['position'], unique=False)
    op.create_index(op.f('ix_log_entries_created_at'), 'log_entries', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_log_entries_created_at'), table_name='log_entries')
    op.drop_index(op.f('ix_log_entries_position'), table_name='log_entries')
    op.drop_index(op.f('ix_log_entries_name'), table_name='log_entries')
    op.drop_index(op.f('ix_log_entries_id'), table_name='log_entries')
    op.drop_table('log_entries')
