"""create messages table

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2025-09-14 10:12:03.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1e7a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # sender/recipient/swap request ids are weak references, no foreign keys
    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('sender_id', sa.Uuid(), nullable=True),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='direct'),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('priority', sa.String(length=10), nullable=False, server_default='medium'),
        sa.Column('related_swap_request_id', sa.Uuid(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "type IN ('direct', 'system', 'support', 'notification')",
            name='ck_messages_type',
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'urgent')",
            name='ck_messages_priority',
        ),
        sa.CheckConstraint(
            "(type = 'system') = (sender_id IS NULL)",
            name='ck_messages_system_sender',
        ),
        sa.CheckConstraint('(is_read) = (read_at IS NOT NULL)', name='ck_messages_read_at'),
        sa.CheckConstraint(
            '(is_archived) = (archived_at IS NOT NULL)', name='ck_messages_archived_at'
        ),
    )

    op.create_index(
        'idx_messages_recipient_read_created',
        'messages',
        ['recipient_id', 'is_read', sa.text('created_at DESC')],
    )
    op.create_index(
        'idx_messages_sender_created', 'messages', ['sender_id', sa.text('created_at DESC')]
    )
    op.create_index('idx_messages_type_priority', 'messages', ['type', 'priority'])
    op.create_index('idx_messages_archived', 'messages', ['is_archived'])
    op.create_index('idx_messages_swap_request', 'messages', ['related_swap_request_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_messages_swap_request', table_name='messages')
    op.drop_index('idx_messages_archived', table_name='messages')
    op.drop_index('idx_messages_type_priority', table_name='messages')
    op.drop_index('idx_messages_sender_created', table_name='messages')
    op.drop_index('idx_messages_recipient_read_created', table_name='messages')
    op.drop_table('messages')
