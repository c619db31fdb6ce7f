"""create user and game tables

Revision ID: 3c9e1f0a7b21
Revises:
Create Date: 2026-10-18 10:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9e1f0a7b21'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_username'), 'user', ['username'], unique=True)

    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('player_one_id', sa.Integer(), nullable=False),
        sa.Column('player_two_id', sa.Integer(), nullable=False),
        sa.Column('invited_by_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('turn_id', sa.Integer(), nullable=True),
        sa.Column('current_position', sa.String(length=128), nullable=False),
        sa.Column('moves', sa.Text(), nullable=True),
        sa.Column('winner_id', sa.Integer(), nullable=True),
        sa.Column('result', sa.String(length=16), nullable=True),
        sa.Column('draw_offer_by_id', sa.Integer(), nullable=True),
        sa.Column('draw_offered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['player_one_id'], ['user.id']),
        sa.ForeignKeyConstraint(['player_two_id'], ['user.id']),
        sa.ForeignKeyConstraint(['invited_by_id'], ['user.id']),
        sa.ForeignKeyConstraint(['turn_id'], ['user.id']),
        sa.ForeignKeyConstraint(['winner_id'], ['user.id']),
        sa.ForeignKeyConstraint(['draw_offer_by_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_game_player_one_id'), 'game', ['player_one_id'], unique=False)
    op.create_index(op.f('ix_game_player_two_id'), 'game', ['player_two_id'], unique=False)
    op.create_index(op.f('ix_game_updated_at'), 'game', ['updated_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_game_updated_at'), table_name='game')
    op.drop_index(op.f('ix_game_player_two_id'), table_name='game')
    op.drop_index(op.f('ix_game_player_one_id'), table_name='game')
    op.drop_table('game')
    op.drop_index(op.f('ix_user_username'), table_name='user')
    op.drop_table('user')
