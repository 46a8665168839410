from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Union
from datetime import datetime

from app.schemas.profile import ProfileResponse
from app.services.listing_query import normalize_tags


class FounderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class StartupListItem(BaseModel):
    """
    One entry of the listing feed.

    ``score`` and ``match_count`` are only set (and serialized) on the
    personalized path; the router excludes unset fields.
    """
    id: str
    name: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []
    website_url: Optional[str] = None
    funding_stage: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
    founder_id: Optional[str] = None
    image_url: Optional[str] = None
    slug: str
    likes: int = 0
    views: int = 0
    profiles: Optional[FounderSummary] = None
    score: Optional[float] = None
    match_count: Optional[int] = None


class StartupDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []
    website_url: Optional[str] = None
    funding_stage: Optional[str] = None
    location: Optional[str] = None
    account_details: Optional[str] = None
    image_url: Optional[str] = None
    founder_id: Optional[str] = None
    mission_statement: Optional[str] = None
    problem_solution: Optional[str] = None
    founder_story: Optional[str] = None
    target_market: Optional[str] = None
    traction: Optional[str] = None
    use_of_funds: Optional[str] = None
    milestones: Optional[str] = None
    team_profiles: Optional[str] = None
    awards: Optional[str] = None
    likes: int = 0
    views: int = 0
    created_at: datetime
    profiles: Optional[ProfileResponse] = None

    @field_validator("id", "founder_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value) if value is not None else None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        return list(normalize_tags(value))


class StartupFields(BaseModel):
    """Editable listing fields shared by create and update."""
    name: str
    short_description: Optional[str] = ""
    description: Optional[str] = ""
    website_url: Optional[str] = ""
    funding_stage: Optional[str] = ""
    location: Optional[str] = ""
    account_details: Optional[str] = ""
    image_url: Optional[str] = ""
    tags: Union[str, List[str], None] = None
    mission_statement: Optional[str] = ""
    problem_solution: Optional[str] = ""
    founder_story: Optional[str] = ""
    target_market: Optional[str] = ""
    traction: Optional[str] = ""
    use_of_funds: Optional[str] = ""
    milestones: Optional[str] = ""
    team_profiles: Optional[str] = ""
    awards: Optional[str] = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value


class StartupCreate(StartupFields):
    pass


class StartupUpdate(StartupFields):
    follower_message: Optional[str] = None


class StartupUpdateResponse(BaseModel):
    message: str
    changes: List[str] = []
    followers_notified: int = 0


class SlugRequest(BaseModel):
    slug: Optional[str] = None
