"""Baseline migration - users, companies, comments, requests, holidays

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-18

Creates every table of the dashboard, including the (record, user) unique
constraint on assigned_facebook_data.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JsonList = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        for name in names
    ]


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('employee_id', sa.String(50), nullable=False),
        sa.Column('role', sa.String(20), server_default=sa.text("'employee'"), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('token_version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('login_time', sa.DateTime(timezone=True), nullable=True),
        *_timestamps('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('employee_id', name='uq_users_employee_id'),
    )

    # ==========================================================================
    # Companies & Comments
    # ==========================================================================
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('industry', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('company_size', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), server_default=sa.text("'active'"), nullable=False),
        sa.Column('category', sa.String(20), server_default=sa.text("'assigned'"), nullable=False),
        sa.Column('assigned_to_user_id', sa.Integer(), nullable=True),
        *_timestamps('created_at', 'updated_at'),
        sa.ForeignKeyConstraint(
            ['assigned_to_user_id'], ['users.id'],
            name='fk_companies_assigned_to_user_id_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_companies'),
    )
    op.create_index('idx_companies_assigned_to', 'companies', ['assigned_to_user_id'])
    op.create_index('idx_companies_category', 'companies', ['category'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('comment_date', sa.DateTime(timezone=True), nullable=False),
        *_timestamps('created_at'),
        sa.ForeignKeyConstraint(
            ['company_id'], ['companies.id'],
            name='fk_comments_company_id_companies', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_comments_user_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_comments'),
    )
    op.create_index('idx_comments_company', 'comments', ['company_id'])
    op.create_index('idx_comments_user_date', 'comments', ['user_id', 'comment_date'])

    # ==========================================================================
    # Allocation Requests
    # ==========================================================================
    op.create_table(
        'data_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('request_type', sa.String(100), nullable=False),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('justification', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('companies_assigned', sa.Integer(), server_default=sa.text('0'), nullable=False),
        *_timestamps('created_at', 'updated_at'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_data_requests_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['approved_by'], ['users.id'],
            name='fk_data_requests_approved_by_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_data_requests'),
    )
    op.create_index('idx_data_requests_user', 'data_requests', ['user_id'])
    op.create_index('idx_data_requests_status', 'data_requests', ['status'])

    op.create_table(
        'facebook_data_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('justification', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('records_assigned', sa.Integer(), server_default=sa.text('0'), nullable=False),
        *_timestamps('created_at', 'updated_at'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_facebook_data_requests_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['approved_by'], ['users.id'],
            name='fk_facebook_data_requests_approved_by_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_facebook_data_requests'),
    )
    op.create_index('idx_facebook_requests_user', 'facebook_data_requests', ['user_id'])
    op.create_index('idx_facebook_requests_status', 'facebook_data_requests', ['status'])

    op.create_table(
        'facebook_data',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('contact', sa.String(50), nullable=True),
        sa.Column('products', JsonList, nullable=False),
        sa.Column('services', JsonList, nullable=False),
        sa.Column('quantity', sa.Integer(), server_default=sa.text('0'), nullable=False),
        *_timestamps('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_facebook_data'),
    )

    op.create_table(
        'assigned_facebook_data',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('facebook_data_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('request_id', sa.Integer(), nullable=True),
        *_timestamps('created_at'),
        sa.ForeignKeyConstraint(
            ['facebook_data_id'], ['facebook_data.id'],
            name='fk_assigned_facebook_data_facebook_data_id_facebook_data', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_assigned_facebook_data_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['request_id'], ['facebook_data_requests.id'],
            name='fk_assigned_facebook_data_request_id_facebook_data_requests',
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_assigned_facebook_data'),
        sa.UniqueConstraint(
            'facebook_data_id', 'user_id', name='uq_assigned_facebook_data_pair'
        ),
    )
    op.create_index('idx_assigned_facebook_data_user', 'assigned_facebook_data', ['user_id'])

    # ==========================================================================
    # Holidays
    # ==========================================================================
    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.String(20), server_default=sa.text("'full_day'"), nullable=False),
        *_timestamps('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_holidays'),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('holidays')
    op.drop_index('idx_assigned_facebook_data_user', table_name='assigned_facebook_data')
    op.drop_table('assigned_facebook_data')
    op.drop_table('facebook_data')
    op.drop_index('idx_facebook_requests_status', table_name='facebook_data_requests')
    op.drop_index('idx_facebook_requests_user', table_name='facebook_data_requests')
    op.drop_table('facebook_data_requests')
    op.drop_index('idx_data_requests_status', table_name='data_requests')
    op.drop_index('idx_data_requests_user', table_name='data_requests')
    op.drop_table('data_requests')
    op.drop_index('idx_comments_user_date', table_name='comments')
    op.drop_index('idx_comments_company', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_companies_category', table_name='companies')
    op.drop_index('idx_companies_assigned_to', table_name='companies')
    op.drop_table('companies')
    op.drop_table('users')
