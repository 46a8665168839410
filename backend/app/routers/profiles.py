"""
Founder profile endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any, List
from uuid import UUID
from datetime import datetime
import logging

from app.database import get_db
from app.models import Profile
from app.schemas.profile import ProfileResponse, ProfileUpsert
from app.schemas.startup import StartupListItem
from app.services.listing_query import ListingFilter, ListingStore, normalize_tags
from app.services.recommendation_engine import RankedListing
from app.routers.startups import to_list_item
from app.core.auth import get_session_claims, email_from_claims

logger = logging.getLogger(__name__)
router = APIRouter(tags=["profiles"])

# List-valued profile fields default to [] rather than NULL
LIST_FIELDS = (
    "specialties",
    "awards",
    "press_links",
    "featured_projects",
    "industry_tags",
    "stage_tags",
    "interest_tags",
)


@router.get("/founder-details")
def get_founder_details(
    email: Optional[str] = Query(None),
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Look up a profile by id (preferred) or email; unknown profiles return null."""
    if not email and not id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or ID parameter is required",
        )

    query = db.query(Profile)
    if id:
        try:
            query = query.filter(Profile.id == UUID(id))
        except ValueError:
            return {"profile": None}
    else:
        query = query.filter(Profile.email == email)

    profile = query.first()
    return {"profile": ProfileResponse.model_validate(profile).model_dump(mode="json") if profile else None}


@router.get("/founder-startups", response_model=List[StartupListItem], response_model_exclude_unset=True)
def get_founder_startups(
    email: Optional[str] = Query(None),
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """A founder's own listings, newest first; unknown founders have none."""
    if not email and not id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or ID parameter is required",
        )

    store = ListingStore(db)
    if id:
        try:
            founder_id = UUID(id)
        except ValueError:
            return []
    else:
        founder_id = store.get_profile_id(email)
        if founder_id is None:
            return []

    listings = store.fetch(ListingFilter().with_founder(founder_id))
    return [to_list_item(RankedListing(startup=s, tags=normalize_tags(s.tags))) for s in listings]


@router.post("/founder-details")
def save_founder_details(payload: ProfileUpsert, db: Session = Depends(get_db)):
    """Create or update the founder profile identified by email."""
    if not payload.full_name or not payload.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Full name and email are required",
        )

    values = payload.model_dump(exclude={"email"})
    values["experience_years"] = values.get("experience_years") or 0
    values["previous_startups"] = values.get("previous_startups") or 0
    for key in LIST_FIELDS:
        values[key] = values.get(key) or []

    profile = db.query(Profile).filter(Profile.email == payload.email).first()
    if profile is not None:
        for key, value in values.items():
            setattr(profile, key, value)
        profile.updated_at = datetime.utcnow()
    else:
        profile = Profile(email=payload.email, **values)
        db.add(profile)
    db.commit()
    db.refresh(profile)

    return {
        "message": "Profile saved successfully",
        "profile": ProfileResponse.model_validate(profile).model_dump(mode="json"),
    }


@router.post("/sync-user")
def sync_user(
    claims: Dict[str, Any] = Depends(get_session_claims),
    db: Session = Depends(get_db),
):
    """
    Ensure the signed-in visitor has a profile row.

    Name and picture come from the session token's ``name``/``picture``
    claims; an existing profile only has its avatar refreshed.
    """
    email = email_from_claims(claims)
    name = claims.get("name") or ""
    picture = claims.get("picture") or ""

    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile is not None:
        if profile.avatar_url != picture:
            logger.info("Updating avatar_url for %s", email)
            profile.avatar_url = picture
            db.commit()
        return {"message": "Profile updated"}

    db.add(Profile(email=email, full_name=name, avatar_url=picture))
    db.commit()
    logger.info("Synced new user %s", email)
    return {"message": "User synced to DB"}
