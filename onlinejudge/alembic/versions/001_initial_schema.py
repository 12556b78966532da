"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates problems, test_cases, users and submissions. Test cases cascade
with their problem; submissions keep a plain problem_id so history
survives problem deletion.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('authority', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'problems',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
    )
    op.create_index('ix_problems_id', 'problems', ['id'])

    op.create_table(
        'test_cases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'problem_id',
            sa.Integer(),
            sa.ForeignKey('problems.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('input', sa.Text(), nullable=False, server_default=''),
        sa.Column('expected_output', sa.Text(), nullable=False, server_default=''),
        sa.Column('comment', sa.Text(), nullable=False, server_default=''),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timeout_seconds', sa.Float(), nullable=False, server_default='1.0'),
    )
    op.create_index('ix_test_cases_id', 'test_cases', ['id'])
    op.create_index('ix_test_cases_problem_id', 'test_cases', ['problem_id'])

    op.create_table(
        'submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('language', sa.String(255), nullable=False),
        sa.Column('code', sa.Text(), nullable=False, server_default=''),
        sa.Column('executed_time', sa.Float(), nullable=False, server_default='-1.0'),
        sa.Column('result', sa.String(255), nullable=False, server_default='-'),
        sa.Column('problem_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_submissions_id', 'submissions', ['id'])
    op.create_index('ix_submissions_result', 'submissions', ['result'])
    op.create_index('ix_submissions_problem_id', 'submissions', ['problem_id'])
    op.create_index('ix_submissions_user_id', 'submissions', ['user_id'])


def downgrade() -> None:
    op.drop_table('submissions')
    op.drop_table('test_cases')
    op.drop_table('problems')
    op.drop_table('users')
