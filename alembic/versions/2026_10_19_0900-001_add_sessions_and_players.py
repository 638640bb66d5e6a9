"""Add training_sessions and players tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create training_sessions and players tables."""
    op.create_table('training_sessions',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('academy_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('category', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sqlmodel.sql.sqltypes.AutoString(length=5), nullable=False),
        sa.Column('end_time', sqlmodel.sql.sqltypes.AutoString(length=5), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False, server_default='Upcoming'),
        sa.Column('coach_ids', sa.JSON(), nullable=False),
        sa.Column('assigned_players', sa.JSON(), nullable=False),
        sa.Column('assigned_batch', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('attendance', sa.JSON(), nullable=False),
        sa.Column('player_metrics', sa.JSON(), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('selected_days', sa.JSON(), nullable=True),
        sa.Column('recurring_end_date', sa.Date(), nullable=True),
        sa.Column('total_occurrences', sa.Integer(), nullable=True),
        sa.Column('parent_session_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_training_sessions_academy_id'), 'training_sessions', ['academy_id'], unique=False)
    op.create_index(op.f('ix_training_sessions_date'), 'training_sessions', ['date'], unique=False)
    op.create_index(op.f('ix_training_sessions_parent_session_id'), 'training_sessions', ['parent_session_id'],
                    unique=False)
    op.create_index('ix_training_sessions_slot', 'training_sessions',
                    ['academy_id', 'date', 'start_time', 'end_time'], unique=False)

    op.create_table('players',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('academy_id', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('performance_history', sa.JSON(), nullable=False),
        sa.Column('overall_rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('average_performance', sa.Float(), nullable=False, server_default='0'),
        sa.Column('last_metrics_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_players_academy_id'), 'players', ['academy_id'], unique=False)


def downgrade() -> None:
    """Drop training_sessions and players tables."""
    op.drop_index(op.f('ix_players_academy_id'), table_name='players')
    op.drop_table('players')
    op.drop_index('ix_training_sessions_slot', table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_parent_session_id'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_date'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_academy_id'), table_name='training_sessions')
    op.drop_table('training_sessions')
