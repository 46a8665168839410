from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.models import Profile, UserPreferences
from app.schemas.onboarding import OnboardingPayload, PreferencesResponse
from app.services.listing_query import normalize_tags

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post("", response_model=PreferencesResponse, status_code=status.HTTP_201_CREATED)
def save_preferences(payload: OnboardingPayload, db: Session = Depends(get_db)):
    """
    Store the visitor's interest profile (tags, preferred stage, location).

    The profile is looked up by email; re-submitting replaces the previous
    preferences.
    """
    email = (payload.email or "").strip()
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")

    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    values = {
        "tags": list(normalize_tags(payload.tags)),
        "stage": payload.size or None,
        "location": payload.location or None,
    }

    prefs = db.query(UserPreferences).filter(UserPreferences.profile_id == profile.id).first()
    if prefs is not None:
        for key, value in values.items():
            setattr(prefs, key, value)
    else:
        prefs = UserPreferences(profile_id=profile.id, **values)
        db.add(prefs)
    db.commit()
    db.refresh(prefs)

    logger.info("Saved preferences for %s (%d tags)", email, len(values["tags"]))
    return prefs
