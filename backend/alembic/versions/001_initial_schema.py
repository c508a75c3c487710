"""Initial schema: users, couples, question catalog, daily prompts, answers, activity

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # member_a / member_b uniqueness keeps a user in at most one couple per column
    op.create_table(
        'couples',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('member_a', sa.String(), nullable=False),
        sa.Column('member_b', sa.String(), nullable=True),
        sa.Column('invite_code', sa.String(length=16), nullable=False),
        sa.Column('relationship_type', sa.String(), nullable=True),
        sa.Column('relationship_start_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['member_a'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_b'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_a'),
        sa.UniqueConstraint('member_b')
    )
    op.create_index('ix_couples_invite_code', 'couples', ['invite_code'], unique=True)

    op.create_table(
        'questions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'question_tags',
        sa.Column('question_id', sa.String(), nullable=False),
        sa.Column('tag', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('question_id', 'tag')
    )
    op.create_index('ix_question_tags_tag', 'question_tags', ['tag'])

    op.create_table(
        'question_history',
        sa.Column('couple_id', sa.String(), nullable=False),
        sa.Column('question_id', sa.String(), nullable=False),
        sa.Column('shown_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['couple_id'], ['couples.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('couple_id', 'question_id')
    )
    op.create_index('ix_question_history_shown_at', 'question_history', ['shown_at'])

    op.create_table(
        'daily_prompts',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('couple_id', sa.String(), nullable=False),
        sa.Column('date_key', sa.String(length=10), nullable=False),
        sa.Column('question_id', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['couple_id'], ['couples.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('couple_id', 'date_key', name='uq_daily_prompt_couple_date')
    )
    op.create_index('ix_daily_prompts_couple_id', 'daily_prompts', ['couple_id'])

    op.create_table(
        'answers',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('couple_id', sa.String(), nullable=False),
        sa.Column('date_key', sa.String(length=10), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['couple_id'], ['couples.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('couple_id', 'date_key', 'user_id', name='uq_answer_couple_date_user')
    )
    op.create_index('ix_answers_couple_date', 'answers', ['couple_id', 'date_key'])

    op.create_table(
        'daily_activities',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('date_key', sa.String(length=10), nullable=False),
        sa.Column('did_photo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('did_mood', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('did_bucket', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('did_question_submit', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('did_question_unlock', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date_key', name='uq_daily_activity_user_date')
    )
    op.create_index('ix_daily_activities_user_id', 'daily_activities', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_daily_activities_user_id', table_name='daily_activities')
    op.drop_table('daily_activities')
    op.drop_index('ix_answers_couple_date', table_name='answers')
    op.drop_table('answers')
    op.drop_index('ix_daily_prompts_couple_id', table_name='daily_prompts')
    op.drop_table('daily_prompts')
    op.drop_index('ix_question_history_shown_at', table_name='question_history')
    op.drop_table('question_history')
    op.drop_index('ix_question_tags_tag', table_name='question_tags')
    op.drop_table('question_tags')
    op.drop_table('questions')
    op.drop_index('ix_couples_invite_code', table_name='couples')
    op.drop_table('couples')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
