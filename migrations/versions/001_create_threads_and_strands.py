"""Create threads and strands tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2024-12-01 12:00:00.000000

Tables Created:
1. threads - story topics with title, description and JSON tag list
2. strands - contributions referencing a thread, cascading on thread deletion

Both tables use 24 character hexadecimal document identifiers as primary keys.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'threads',
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_threads_created_at', 'threads', ['created_at'])

    op.create_table(
        'strands',
        sa.Column('id', sa.String(length=24), primary_key=True),
        sa.Column(
            'thread_id',
            sa.String(length=24),
            sa.ForeignKey('threads.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('contributor_name', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_strands_thread_id', 'strands', ['thread_id'])
    op.create_index('ix_strands_created_at', 'strands', ['created_at'])


def downgrade():
    op.drop_index('ix_strands_created_at', table_name='strands')
    op.drop_index('ix_strands_thread_id', table_name='strands')
    op.drop_table('strands')
    op.drop_index('ix_threads_created_at', table_name='threads')
    op.drop_table('threads')
