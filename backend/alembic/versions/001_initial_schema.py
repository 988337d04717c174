"""Initial Landlord Ledger schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-18

Landlords, reviews, votes and contributions, with the uniqueness keys the
review lifecycle relies on:
- landlords: lower(name)
- votes: (review_id, voter_identity)
- landlord_contributions: (contributor_identity, landlord_id)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

RATING_COLUMNS = (
    'overall_rating',
    'deposit_return_rating',
    'responsiveness_rating',
    'ethics_rating',
    'maintenance_rating',
    'communication_rating',
)


def upgrade() -> None:
    # === LANDLORDS ===
    op.create_table(
        'landlords',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('average_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('total_reviews', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('deposit_return_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('responsiveness_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('ethics_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('maintenance_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('communication_rating', sa.Float(), nullable=True, server_default='0'),
    )
    op.create_index(
        'uq_landlords_name_lower',
        'landlords',
        [sa.text('lower(name)')],
        unique=True,
    )

    # === REVIEWS ===
    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('landlord_id', sa.Integer(), sa.ForeignKey('landlords.id'), nullable=False, index=True),
        sa.Column('author_name', sa.String(255), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default=sa.false()),
        *[sa.Column(col, sa.Integer(), nullable=False) for col in RATING_COLUMNS],
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('helpful_votes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('not_helpful_votes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        *[
            sa.CheckConstraint(f'{col} BETWEEN 1 AND 5', name=f'ck_reviews_{col}_range')
            for col in RATING_COLUMNS
        ],
        sa.CheckConstraint('helpful_votes >= 0', name='ck_reviews_helpful_votes'),
        sa.CheckConstraint('not_helpful_votes >= 0', name='ck_reviews_not_helpful_votes'),
    )

    # === VOTES ===
    op.create_table(
        'votes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('review_id', sa.Integer(), sa.ForeignKey('reviews.id'), nullable=False, index=True),
        sa.Column('voter_identity', sa.String(255), nullable=False),
        sa.Column('is_helpful', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('review_id', 'voter_identity', name='uq_votes_review_voter'),
    )

    # === LANDLORD CONTRIBUTIONS ===
    op.create_table(
        'landlord_contributions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('landlord_id', sa.Integer(), sa.ForeignKey('landlords.id'), nullable=False, index=True),
        sa.Column('suggested_name', sa.String(255), nullable=False),
        sa.Column('contact_info', sa.String(255), nullable=True),
        sa.Column('how_you_know', sa.Text(), nullable=False),
        sa.Column('contributor_identity', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            'contributor_identity', 'landlord_id', name='uq_contributions_contributor_landlord'
        ),
    )


def downgrade() -> None:
    op.drop_table('landlord_contributions')
    op.drop_table('votes')
    op.drop_table('reviews')
    op.drop_index('uq_landlords_name_lower', table_name='landlords')
    op.drop_table('landlords')
