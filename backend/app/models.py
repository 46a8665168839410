from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON, Uuid, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import sqlalchemy as sa
from app.database import Base


# Native text[] on Postgres (supports the && overlap operator), JSON elsewhere.
StringList = JSON().with_variant(ARRAY(String), "postgresql")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, nullable=True)
    location = Column(String, nullable=True)
    experience_years = Column(Integer, nullable=True, default=0)
    previous_startups = Column(Integer, nullable=True, default=0)
    education = Column(String, nullable=True)
    specialties = Column(StringList, nullable=True)
    funding_raised = Column(String, nullable=True)
    origin_story = Column(Text, nullable=True)
    career_path = Column(Text, nullable=True)
    vision = Column(Text, nullable=True)
    linkedin_url = Column(String, nullable=True)
    twitter_url = Column(String, nullable=True)
    github_url = Column(String, nullable=True)
    medium_url = Column(String, nullable=True)
    personal_website = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    awards = Column(StringList, nullable=True)
    press_links = Column(StringList, nullable=True)
    featured_projects = Column(StringList, nullable=True)
    industry_tags = Column(StringList, nullable=True)
    stage_tags = Column(StringList, nullable=True)
    interest_tags = Column(StringList, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    preferences = relationship("UserPreferences", back_populates="profile", uselist=False)
    startups = relationship("Startup", back_populates="founder")


class UserPreferences(Base):
    """Interest profile captured once during onboarding."""
    __tablename__ = "user_preferences"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), unique=True, nullable=False)
    tags = Column(StringList, nullable=True)
    stage = Column(String, nullable=True)
    location = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    profile = relationship("Profile", back_populates="preferences")


class Startup(Base):
    __tablename__ = "startups"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    short_description = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    tags = Column(StringList, nullable=True)
    website_url = Column(String, nullable=True)
    funding_stage = Column(String, nullable=True, index=True)
    location = Column(String, nullable=True, index=True)
    account_details = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    founder_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True, index=True)
    mission_statement = Column(Text, nullable=True)
    problem_solution = Column(Text, nullable=True)
    founder_story = Column(Text, nullable=True)
    target_market = Column(Text, nullable=True)
    traction = Column(Text, nullable=True)
    use_of_funds = Column(Text, nullable=True)
    milestones = Column(Text, nullable=True)
    team_profiles = Column(Text, nullable=True)
    awards = Column(Text, nullable=True)
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    founder = relationship("Profile", back_populates="startups")
    comments = relationship("Comment", back_populates="startup")


class Follow(Base):
    __tablename__ = "follows"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("email", "slug", name="uq_follows_email_slug"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    startup_id = Column(Uuid(as_uuid=True), ForeignKey("startups.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    startup = relationship("Startup", back_populates="comments")
    author = relationship("Profile")
    votes = relationship("CommentVote", back_populates="comment")


class CommentVote(Base):
    __tablename__ = "comment_votes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    comment_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    vote_type = Column(Integer, nullable=False)  # +1 or -1
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    comment = relationship("Comment", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_votes_comment_user"),
        sa.CheckConstraint("vote_type IN (-1, 1)", name="ck_comment_votes_vote_type"),
    )
