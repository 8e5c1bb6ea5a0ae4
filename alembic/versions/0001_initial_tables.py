"""Create applications, history and settings tables

Revision ID: 0001
Revises:
Create Date: 2025-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('company', sa.Text(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=100), nullable=False, default='Applied'),
        sa.Column('date_applied', sa.DateTime(), nullable=False),
        sa.Column('process_steps', sa.JSON(), nullable=False),
        sa.Column('current_step_index', sa.Integer(), nullable=False, default=0),
        sa.Column('outcome', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False, default=''),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_applications_company', 'applications', ['company'], unique=False)
    op.create_index('ix_applications_status', 'applications', ['status'], unique=False)
    op.create_index('ix_applications_date_applied', 'applications', ['date_applied'], unique=False)
    op.create_index('ix_applications_last_updated', 'applications', ['last_updated'], unique=False)

    op.create_table(
        'history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('application_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=100), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_history_application_id', 'history', ['application_id'], unique=False)
    op.create_index('ix_history_date', 'history', ['date'], unique=False)

    op.create_table(
        'settings',
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('key')
    )


def downgrade() -> None:
    op.drop_table('settings')
    op.drop_index('ix_history_date', table_name='history')
    op.drop_index('ix_history_application_id', table_name='history')
    op.drop_table('history')
    op.drop_index('ix_applications_last_updated', table_name='applications')
    op.drop_index('ix_applications_date_applied', table_name='applications')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_company', table_name='applications')
    op.drop_table('applications')
