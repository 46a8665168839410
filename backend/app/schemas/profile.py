from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime


class ProfileFields(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    experience_years: Optional[int] = None
    previous_startups: Optional[int] = None
    education: Optional[str] = None
    specialties: Optional[List[str]] = None
    funding_raised: Optional[str] = None
    origin_story: Optional[str] = None
    career_path: Optional[str] = None
    vision: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    github_url: Optional[str] = None
    medium_url: Optional[str] = None
    personal_website: Optional[str] = None
    contact_email: Optional[str] = None
    awards: Optional[List[str]] = None
    press_links: Optional[List[str]] = None
    featured_projects: Optional[List[str]] = None
    industry_tags: Optional[List[str]] = None
    stage_tags: Optional[List[str]] = None
    interest_tags: Optional[List[str]] = None


class ProfileUpsert(ProfileFields):
    """Founder-details form payload. full_name and email are checked by the router."""
    email: Optional[str] = None


class ProfileResponse(ProfileFields):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value)
