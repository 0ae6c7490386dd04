"""Initial schema: users, curriculum, progress and code submissions

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-12-21 17:20:35.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Create user, project, lesson, user_progress and code_submission tables.
    """
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('subscription_plan', sa.String(), nullable=True),
        sa.Column('subscription_status', sa.String(), nullable=True),
        sa.Column('total_lessons_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_active_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='user_pkey'),
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'project',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('difficulty', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('estimated_hours', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='project_pkey'),
        sa.UniqueConstraint('order', name='project_order_key'),
        sa.CheckConstraint(
            "difficulty IN ('beginner', 'intermediate', 'advanced')",
            name='project_difficulty_check'
        ),
    )
    op.create_index(op.f('ix_project_slug'), 'project', ['slug'], unique=True)

    op.create_table(
        'lesson',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('estimated_minutes', sa.Integer(), nullable=False, server_default='20'),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('problem_content', sa.Text(), nullable=False),
        sa.Column('solution_content', sa.Text(), nullable=False),
        sa.Column('explanation_content', sa.Text(), nullable=False, server_default=''),
        sa.Column('starter_code', sa.Text(), nullable=False),
        sa.Column('solution_code', sa.Text(), nullable=False),
        sa.Column('test_code', sa.Text(), nullable=True),
        sa.Column('hints', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['project.id'], name='lesson_project_id_fkey', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='lesson_pkey'),
        sa.UniqueConstraint('project_id', 'slug', name='uq_lesson_project_slug'),
        sa.UniqueConstraint('project_id', 'order', name='uq_lesson_project_order'),
    )
    op.create_index(op.f('ix_lesson_project_id'), 'lesson', ['project_id'], unique=False)

    op.create_table(
        'user_progress',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('saved_code', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('time_spent_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('hints_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], name='user_progress_user_id_fkey'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lesson.id'], name='user_progress_lesson_id_fkey'),
        sa.PrimaryKeyConstraint('id', name='user_progress_pkey'),
        sa.UniqueConstraint('user_id', 'lesson_id', name='uq_user_progress_user_lesson'),
        sa.CheckConstraint(
            "status IN ('in_progress', 'completed')",
            name='user_progress_status_check'
        ),
    )
    op.create_index(op.f('ix_user_progress_user_id'), 'user_progress', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_progress_lesson_id'), 'user_progress', ['lesson_id'], unique=False)
    op.create_index(op.f('ix_user_progress_status'), 'user_progress', ['status'], unique=False)

    op.create_table(
        'code_submission',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('output', sa.Text(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('passed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], name='code_submission_user_id_fkey'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lesson.id'], name='code_submission_lesson_id_fkey'),
        sa.PrimaryKeyConstraint('id', name='code_submission_pkey'),
    )
    op.create_index(op.f('ix_code_submission_user_id'), 'code_submission', ['user_id'], unique=False)
    op.create_index(op.f('ix_code_submission_lesson_id'), 'code_submission', ['lesson_id'], unique=False)


def downgrade() -> None:
    """
    Drop all tables created by this revision.
    """
    op.drop_index(op.f('ix_code_submission_lesson_id'), table_name='code_submission')
    op.drop_index(op.f('ix_code_submission_user_id'), table_name='code_submission')
    op.drop_table('code_submission')
    op.drop_index(op.f('ix_user_progress_status'), table_name='user_progress')
    op.drop_index(op.f('ix_user_progress_lesson_id'), table_name='user_progress')
    op.drop_index(op.f('ix_user_progress_user_id'), table_name='user_progress')
    op.drop_table('user_progress')
    op.drop_index(op.f('ix_lesson_project_id'), table_name='lesson')
    op.drop_table('lesson')
    op.drop_index(op.f('ix_project_slug'), table_name='project')
    op.drop_table('project')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_index(op.f('ix_user_username'), table_name='user')
    op.drop_table('user')
