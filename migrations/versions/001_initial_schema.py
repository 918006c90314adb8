"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('grades',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_table('subjects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('grade_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_subjects_grade_id', 'subjects', ['grade_id'])
    op.create_table('chapters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('grade_id', sa.Integer(), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_chapters_grade_id', 'chapters', ['grade_id'])
    op.create_index('ix_chapters_subject_id', 'chapters', ['subject_id'])
    op.create_table('contents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content_type', sa.String(length=20), nullable=True),
        sa.Column('youtube_link', sa.Text(), nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('class', sa.String(), nullable=True),
        sa.Column('subject', sa.String(), nullable=True),
        sa.Column('chapter_id', sa.Integer(), nullable=True),
        sa.Column('pages', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contents_class', 'contents', ['class'])
    op.create_index('ix_contents_subject', 'contents', ['subject'])
    op.create_index('ix_contents_chapter_id', 'contents', ['chapter_id'])
    op.create_table('profiles',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('grade', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_index('ix_contents_chapter_id', table_name='contents')
    op.drop_index('ix_contents_subject', table_name='contents')
    op.drop_index('ix_contents_class', table_name='contents')
    op.drop_table('contents')
    op.drop_index('ix_chapters_subject_id', table_name='chapters')
    op.drop_index('ix_chapters_grade_id', table_name='chapters')
    op.drop_table('chapters')
    op.drop_index('ix_subjects_grade_id', table_name='subjects')
    op.drop_table('subjects')
    op.drop_table('grades')
