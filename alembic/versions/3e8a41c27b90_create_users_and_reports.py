"""create users and reports

Revision ID: 3e8a41c27b90
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '3e8a41c27b90'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql')
USER_ROLE = sa.Enum('user', 'admin', name='user_role')
CRIME_TYPE = sa.Enum(
    'theft',
    'burglary',
    'assault',
    'fraud',
    'vandalism',
    'suspicious-activity',
    'other',
    name='crime_type',
)
REPORT_STATUS = sa.Enum('pending', 'reviewing', 'verified', 'resolved', 'rejected', name='report_status')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_updated_at', 'users', ['updated_at'])

    op.create_table(
        'reports',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
        sa.Column('tracking_id', sa.String(length=16), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('crime_type', CRIME_TYPE, nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False),
        sa.Column('reporter_id', sa.String(), nullable=True),
        sa.Column('reporter_name', sa.String(), nullable=True),
        sa.Column('reporter_contact', sa.String(), nullable=True),
        sa.Column('incident_date', sa.Date(), nullable=False),
        sa.Column('incident_time', sa.String(length=5), nullable=False),
        sa.Column('incident_datetime', sa.DateTime(), nullable=False),
        sa.Column('status', REPORT_STATUS, nullable=False),
        sa.Column('action_details', sa.Text(), nullable=True),
        sa.Column('images', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reports_id', 'reports', ['id'])
    op.create_index('ix_reports_tracking_id', 'reports', ['tracking_id'], unique=True)
    op.create_index('ix_reports_updated_at', 'reports', ['updated_at'])
    op.create_index('ix_reports_latitude', 'reports', ['latitude'])
    op.create_index('ix_reports_longitude', 'reports', ['longitude'])
    op.create_index('ix_reports_is_anonymous', 'reports', ['is_anonymous'])
    op.create_index('ix_reports_reporter_id', 'reports', ['reporter_id'])
    op.create_index('ix_reports_incident_datetime', 'reports', ['incident_datetime'])
    op.create_index('ix_reports_status', 'reports', ['status'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('reports')
    op.drop_table('users')
    REPORT_STATUS.drop(op.get_bind(), checkfirst=True)
    CRIME_TYPE.drop(op.get_bind(), checkfirst=True)
    USER_ROLE.drop(op.get_bind(), checkfirst=True)
