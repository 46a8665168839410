from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Union
from datetime import datetime

from app.services.listing_query import normalize_tags


class OnboardingPayload(BaseModel):
    """
    Preferences captured by the onboarding wizard.

    ``size`` is the wizard's name for the preferred funding stage.
    """
    email: Optional[str] = None
    tags: Union[str, List[str], None] = None
    size: Optional[str] = None
    location: Optional[str] = None


class PreferencesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_id: str
    tags: List[str] = []
    stage: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "profile_id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value):
        return str(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        return list(normalize_tags(value))
