"""Initial messaging schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

Creates the users and messages tables.

IMPORTANT NOTES:
1. users.email carries a unique index; lookups are done on the lowercased value
2. marital_status is stored as a short string checked by the application
3. messages.sender/receiver cascade when the referenced user row is deleted
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
    """Create the users and messages tables with their indexes."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('gender', sa.Boolean(), nullable=False),
        sa.Column('marital_status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('sender', sa.Integer(), nullable=False),
        sa.Column('receiver', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['sender'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['receiver'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_id', 'messages', ['id'])
    op.create_index('ix_messages_sender', 'messages', ['sender'])
    op.create_index('ix_messages_receiver', 'messages', ['receiver'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])
    op.create_index('idx_messages_sender_receiver', 'messages', ['sender', 'receiver'])


def downgrade() -> None:
    """Drop both tables. Messages first, they reference users."""
    op.drop_index('idx_messages_sender_receiver', table_name='messages')
    op.drop_index('ix_messages_created_at', table_name='messages')
    op.drop_index('ix_messages_receiver', table_name='messages')
    op.drop_index('ix_messages_sender', table_name='messages')
    op.drop_index('ix_messages_id', table_name='messages')
    op.drop_table('messages')

    op.drop_index('ix_users_created_at', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
