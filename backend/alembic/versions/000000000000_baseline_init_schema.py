"""baseline_init_schema

Revision ID: 000000000000
Revises:
Create Date: 2025-06-01 00:00:00.000000

Creates profiles, user_preferences, startups, follows, comments and
comment_votes. All other migrations should depend on this revision.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '000000000000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('experience_years', sa.Integer(), nullable=True),
        sa.Column('previous_startups', sa.Integer(), nullable=True),
        sa.Column('education', sa.String(), nullable=True),
        sa.Column('specialties', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('funding_raised', sa.String(), nullable=True),
        sa.Column('origin_story', sa.Text(), nullable=True),
        sa.Column('career_path', sa.Text(), nullable=True),
        sa.Column('vision', sa.Text(), nullable=True),
        sa.Column('linkedin_url', sa.String(), nullable=True),
        sa.Column('twitter_url', sa.String(), nullable=True),
        sa.Column('github_url', sa.String(), nullable=True),
        sa.Column('medium_url', sa.String(), nullable=True),
        sa.Column('personal_website', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('awards', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('press_links', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('featured_projects', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('industry_tags', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('stage_tags', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('interest_tags', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=True)

    op.create_table(
        'user_preferences',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('profile_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('tags', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('stage', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('profile_id')
    )

    op.create_table(
        'startups',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('short_description', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tags', postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('funding_stage', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('account_details', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('founder_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('mission_statement', sa.Text(), nullable=True),
        sa.Column('problem_solution', sa.Text(), nullable=True),
        sa.Column('founder_story', sa.Text(), nullable=True),
        sa.Column('target_market', sa.Text(), nullable=True),
        sa.Column('traction', sa.Text(), nullable=True),
        sa.Column('use_of_funds', sa.Text(), nullable=True),
        sa.Column('milestones', sa.Text(), nullable=True),
        sa.Column('team_profiles', sa.Text(), nullable=True),
        sa.Column('awards', sa.Text(), nullable=True),
        sa.Column('likes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('views', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['founder_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_startups_slug'), 'startups', ['slug'], unique=True)
    op.create_index(op.f('ix_startups_founder_id'), 'startups', ['founder_id'], unique=False)
    op.create_index(op.f('ix_startups_funding_stage'), 'startups', ['funding_stage'], unique=False)
    op.create_index(op.f('ix_startups_location'), 'startups', ['location'], unique=False)
    # Tag overlap (&&) lookups
    op.create_index('ix_startups_tags_gin', 'startups', ['tags'], unique=False, postgresql_using='gin')

    op.create_table(
        'follows',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', 'slug', name='uq_follows_email_slug')
    )
    op.create_index(op.f('ix_follows_email'), 'follows', ['email'], unique=False)
    op.create_index(op.f('ix_follows_slug'), 'follows', ['slug'], unique=False)

    op.create_table(
        'comments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('startup_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('parent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['startup_id'], ['startups.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['parent_id'], ['comments.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_comments_startup_id'), 'comments', ['startup_id'], unique=False)

    op.create_table(
        'comment_votes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('comment_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('vote_type', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('comment_id', 'user_id', name='uq_comment_votes_comment_user'),
        sa.CheckConstraint('vote_type IN (-1, 1)', name='ck_comment_votes_vote_type')
    )
    op.create_index(op.f('ix_comment_votes_comment_id'), 'comment_votes', ['comment_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_comment_votes_comment_id'), table_name='comment_votes')
    op.drop_table('comment_votes')
    op.drop_index(op.f('ix_comments_startup_id'), table_name='comments')
    op.drop_table('comments')
    op.drop_index(op.f('ix_follows_slug'), table_name='follows')
    op.drop_index(op.f('ix_follows_email'), table_name='follows')
    op.drop_table('follows')
    op.drop_index('ix_startups_tags_gin', table_name='startups')
    op.drop_index(op.f('ix_startups_location'), table_name='startups')
    op.drop_index(op.f('ix_startups_funding_stage'), table_name='startups')
    op.drop_index(op.f('ix_startups_founder_id'), table_name='startups')
    op.drop_index(op.f('ix_startups_slug'), table_name='startups')
    op.drop_table('startups')
    op.drop_table('user_preferences')
    op.drop_index(op.f('ix_profiles_email'), table_name='profiles')
    op.drop_table('profiles')
