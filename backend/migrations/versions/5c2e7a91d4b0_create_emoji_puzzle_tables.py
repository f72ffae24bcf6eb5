"""create user, emoji_puzzle, emoji_puzzle_session and emoji_puzzle_attempt

Revision ID: 5c2e7a91d4b0
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e7a91d4b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'emoji_puzzle',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('emoji_sequence', sa.Text(), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False),
        sa.Column('hint', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('difficulty', sa.String(length=16), nullable=True),
        sa.Column('language', sa.String(length=16), nullable=True),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_emoji_puzzle_user_id', 'emoji_puzzle', ['user_id'])

    op.create_table(
        'emoji_puzzle_session',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('mode', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('total_questions', sa.Integer(), nullable=True),
        sa.Column('correct_answers', sa.Integer(), nullable=True),
    )
    op.create_index('ix_emoji_puzzle_session_user_id', 'emoji_puzzle_session', ['user_id'])

    op.create_table(
        'emoji_puzzle_attempt',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('session_id', sa.String(length=36), sa.ForeignKey('emoji_puzzle_session.id'), nullable=True),
        sa.Column('puzzle_id', sa.String(length=36), sa.ForeignKey('emoji_puzzle.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('guess_text', sa.Text(), nullable=True),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_emoji_puzzle_attempt_session_id', 'emoji_puzzle_attempt', ['session_id'])
    op.create_index('ix_emoji_puzzle_attempt_puzzle_id', 'emoji_puzzle_attempt', ['puzzle_id'])
    op.create_index('ix_emoji_puzzle_attempt_user_id', 'emoji_puzzle_attempt', ['user_id'])


def downgrade():
    op.drop_table('emoji_puzzle_attempt')
    op.drop_table('emoji_puzzle_session')
    op.drop_table('emoji_puzzle')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
