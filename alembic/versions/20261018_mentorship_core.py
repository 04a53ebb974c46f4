"""
create users, mentorship, sessions, goals and notifications tables

Revision ID: 20261018_mentorship_core
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261018_mentorship_core'
down_revision = None
branch_labels = None
depends_on = None

OPEN_PAIR_CLAUSE = sa.text("status IN ('requested', 'active')")


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='alumni'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true')),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('position', sa.String(length=150), nullable=True),
        sa.Column('company_name', sa.String(length=150), nullable=True),
        sa.Column('current_city', sa.String(length=100), nullable=True),
        sa.Column('school_name', sa.String(length=200), nullable=True),
        sa.Column('end_year', sa.Integer(), nullable=True),
        sa.Column('bio', sa.String(length=500), nullable=True),
        sa.Column('profile_picture', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'mentorship',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mentor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('mentee_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('area_of_guidance', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='requested'),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint('mentor_id <> mentee_id', name='check_mentorship_distinct_parties'),
    )
    op.create_index('ix_mentorship_id', 'mentorship', ['id'])
    op.create_index('ix_mentorship_mentor_id', 'mentorship', ['mentor_id'])
    op.create_index('ix_mentorship_mentee_id', 'mentorship', ['mentee_id'])
    op.create_index('ix_mentorship_status', 'mentorship', ['status'])
    op.create_index(
        'uq_mentorship_open_pair',
        'mentorship',
        ['mentor_id', 'mentee_id'],
        unique=True,
        sqlite_where=OPEN_PAIR_CLAUSE,
        postgresql_where=OPEN_PAIR_CLAUSE,
    )

    op.create_table(
        'mentorship_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mentorship_id', sa.Integer(), sa.ForeignKey('mentorship.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('meeting_link', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint('duration_minutes > 0', name='check_session_duration_positive'),
    )
    op.create_index('ix_mentorship_sessions_id', 'mentorship_sessions', ['id'])
    op.create_index('ix_mentorship_sessions_mentorship_id', 'mentorship_sessions', ['mentorship_id'])
    op.create_index('ix_mentorship_sessions_status', 'mentorship_sessions', ['status'])

    op.create_table(
        'mentorship_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mentorship_id', sa.Integer(), sa.ForeignKey('mentorship.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('progress_percentage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='not_started'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(
            'progress_percentage >= 0 AND progress_percentage <= 100',
            name='check_goal_progress_range',
        ),
    )
    op.create_index('ix_mentorship_goals_id', 'mentorship_goals', ['id'])
    op.create_index('ix_mentorship_goals_mentorship_id', 'mentorship_goals', ['mentorship_id'])
    op.create_index('ix_mentorship_goals_status', 'mentorship_goals', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipient_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('actor_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('mentorship_id', sa.Integer(), sa.ForeignKey('mentorship.id', ondelete='SET NULL'), nullable=True),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('message', sa.String(length=500), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])
    op.create_index('ix_notifications_actor_id', 'notifications', ['actor_id'])
    op.create_index('ix_notifications_mentorship_id', 'notifications', ['mentorship_id'])
    op.create_index('ix_notifications_event_type', 'notifications', ['event_type'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('mentorship_goals')
    op.drop_table('mentorship_sessions')
    op.drop_index('uq_mentorship_open_pair', table_name='mentorship')
    op.drop_table('mentorship')
    op.drop_table('user_profiles')
    op.drop_table('users')
