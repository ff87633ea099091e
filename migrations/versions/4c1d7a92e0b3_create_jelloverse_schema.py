"""create_jelloverse_schema

Revision ID: 4c1d7a92e0b3
Revises:
Create Date: 2024-12-20 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7a92e0b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, events and point_transactions tables."""
    op.create_table('users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=32), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('vibes', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        sa.Column('num_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_tasks', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('num_points >= 0', name='ck_users_num_points_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('display_name'),
    )
    # Directory and leaderboard ordering
    op.create_index('ix_users_num_points', 'users', ['num_points'], unique=False)

    op.create_table('events',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('creator_id', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('vibe', sa.String(length=32), nullable=True),
        sa.Column('location_name', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=500), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('is_core', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attendees', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='[]'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['creator_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_creator_id', 'events', ['creator_id'], unique=False)
    # Calendar listing scans by start time
    op.create_index('ix_events_start_time', 'events', ['start_time'], unique=False)

    op.create_table('point_transactions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('task_id', sa.String(length=50), nullable=False),
        sa.Column('points_delta', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_point_transactions_user_id', 'point_transactions', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop all Jelloverse tables."""
    op.drop_index('ix_point_transactions_user_id', table_name='point_transactions')
    op.drop_table('point_transactions')
    op.drop_index('ix_events_start_time', table_name='events')
    op.drop_index('ix_events_creator_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_users_num_points', table_name='users')
    op.drop_table('users')
