"""create_budget_tables

Creates the participatory budget tables: budget, budget_phase,
budget_investment and poll. Translatable texts are stored as JSON
``{locale: text}`` mappings.

Revision ID: 3c9d1e7a5b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c9d1e7a5b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'budget',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.JSON(), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=True),
        sa.Column('phase', sa.String(length=40), nullable=False),
        sa.Column('voting_style', sa.String(length=20), nullable=False,
                  server_default='knapsack'),
        sa.Column('results_enabled', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('stats_enabled', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('advanced_stats_enabled', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
        sa.UniqueConstraint('slug', name='uq_budget_slug'),
    )

    op.create_table(
        'budget_phase',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('budget_id', sa.Integer(), sa.ForeignKey('budget.id'),
                  nullable=False),
        sa.Column('kind', sa.String(length=40), nullable=False),
        sa.Column('starts_at', sa.DateTime(), nullable=True),
        sa.Column('ends_at', sa.DateTime(), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False,
                  server_default=sa.true()),
        sa.Column('name', sa.JSON(), nullable=False),
        sa.Column('description', sa.JSON(), nullable=False),
        sa.Column('summary', sa.JSON(), nullable=False),
        sa.Column('summary_merged_locales', sa.JSON(), nullable=False),
    )
    op.create_index('ix_budget_phase_budget_id', 'budget_phase', ['budget_id'])

    op.create_table(
        'budget_investment',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('budget_id', sa.Integer(), sa.ForeignKey('budget.id'),
                  nullable=False),
        sa.Column('title', sa.String(length=300), nullable=False),
        sa.Column('winner', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
    )
    op.create_index('ix_budget_investment_budget_id', 'budget_investment',
                    ['budget_id'])

    op.create_table(
        'poll',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('budget_id', sa.Integer(), sa.ForeignKey('budget.id'),
                  nullable=True),
        sa.Column('name', sa.String(length=300), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
    )
    op.create_index('ix_poll_budget_id', 'poll', ['budget_id'])


def downgrade() -> None:
    op.drop_index('ix_poll_budget_id', table_name='poll')
    op.drop_table('poll')
    op.drop_index('ix_budget_investment_budget_id', table_name='budget_investment')
    op.drop_table('budget_investment')
    op.drop_index('ix_budget_phase_budget_id', table_name='budget_phase')
    op.drop_table('budget_phase')
    op.drop_table('budget')
