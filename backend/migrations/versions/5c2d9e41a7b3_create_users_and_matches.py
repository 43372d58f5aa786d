"""create users and matches tables

Revision ID: 5c2d9e41a7b3
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d9e41a7b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('user_id', sa.String(length=32), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False, server_default='player'),
            sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('losses', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('rating', sa.Integer(), nullable=False, server_default='1000'),
            sa.Column('created_at', sa.Integer(), nullable=False),
        )
        op.create_index('ix_users_rating', 'users', ['rating'])

    if 'matches' not in existing_tables:
        op.create_table(
            'matches',
            sa.Column('match_id', sa.String(length=64), primary_key=True),
            sa.Column('player1_id', sa.String(length=32), sa.ForeignKey('users.user_id'), nullable=False),
            sa.Column('player2_id', sa.String(length=32), sa.ForeignKey('users.user_id'), nullable=False),
            sa.Column('player1_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('player2_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('winner_id', sa.String(length=32), nullable=True),
            sa.Column('start_time', sa.BigInteger(), nullable=False),
            sa.Column('end_time', sa.BigInteger(), nullable=True),
            sa.Column('state', sa.String(length=16), nullable=False, server_default='active'),
        )
        op.create_index('ix_matches_state', 'matches', ['state'])
        op.create_index('idx_matches_players', 'matches', ['player1_id', 'player2_id'])


def downgrade():
    op.drop_index('idx_matches_players', table_name='matches')
    op.drop_index('ix_matches_state', table_name='matches')
    op.drop_table('matches')
    op.drop_index('ix_users_rating', table_name='users')
    op.drop_table('users')
