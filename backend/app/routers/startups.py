from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload
from typing import Optional, List
import logging
import re
import uuid as uuid_lib

from app.database import get_db
from app.models import Follow, Profile, Startup
from app.schemas.profile import ProfileResponse
from app.schemas.startup import (
    FounderSummary,
    StartupCreate,
    StartupDetail,
    StartupListItem,
    StartupUpdate,
    StartupUpdateResponse,
)
from app.services import recommendation_engine
from app.services.listing_query import ListingStore, normalize_tags, parse_sort
from app.services.recommendation_engine import ListingRequest, RankedListing
from app.core.auth import get_current_profile
from app.core.config import settings
from app.utils.timing import now_ms, log_elapsed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/startup", tags=["startups"])


def to_list_item(ranked: RankedListing) -> StartupListItem:
    startup = ranked.startup
    item = {
        "id": str(startup.id),
        "name": startup.name,
        "short_description": startup.short_description,
        "description": startup.description,
        "tags": list(ranked.tags),
        "website_url": startup.website_url,
        "funding_stage": startup.funding_stage,
        "location": startup.location,
        "created_at": startup.created_at,
        "founder_id": str(startup.founder_id) if startup.founder_id else None,
        "image_url": startup.image_url,
        "slug": startup.slug,
        "likes": startup.likes or 0,
        "views": startup.views or 0,
        "profiles": FounderSummary.model_validate(startup.founder) if startup.founder else None,
    }
    # Score fields are left unset (and so not serialized) on the unfiltered path
    if ranked.is_scored:
        item["score"] = ranked.score
        item["match_count"] = ranked.match_count
    return StartupListItem(**item)


def make_slug(name: str) -> str:
    """Lowercased name with whitespace runs hyphenated, plus a uuid4 suffix."""
    base = re.sub(r"\s+", "-", name.strip()).lower()
    return f"{base}-{uuid_lib.uuid4()}"


@router.get("", response_model=List[StartupListItem], response_model_exclude_unset=True)
def list_startups(
    email: Optional[str] = Query(None, description="Visitor email; enables personalization"),
    query: Optional[str] = Query(None, description="Search in name or tags"),
    tags: Optional[str] = Query(None, description="Comma-separated tag filter"),
    stage: Optional[str] = Query(None, description="Funding stage filter"),
    location: Optional[str] = Query(None, description="Location filter"),
    sort: Optional[str] = Query(None, description="date_asc, date_desc, likes_asc, likes_desc, views_asc, views_desc"),
    db: Session = Depends(get_db),
):
    """
    Ranked listing feed.

    Personalized by the visitor's stored preferences when ``email`` resolves
    to a profile with preference tags; request-level filters override the
    stored ones. Unknown ``sort`` values are ignored.
    """
    t0 = now_ms()
    request = ListingRequest(
        requester_email=email.strip() if email and email.strip() else None,
        text_query=query,
        stage_override=stage or None,
        location_override=location or None,
        tags_override=normalize_tags(tags),
        sort=parse_sort(sort),
    )

    ranked = recommendation_engine.get_ranked_listings(ListingStore(db), request)
    result = [to_list_item(r) for r in ranked]

    if settings.DEBUG:
        log_elapsed(t0, f"GET /startup email={request.requester_email} count={len(result)}", logger.debug)
    return result


@router.get("/{slug}", response_model=StartupDetail)
def get_startup(slug: str, db: Session = Depends(get_db)):
    """Full listing with its founder's profile."""
    startup = (
        db.query(Startup)
        .options(selectinload(Startup.founder))
        .filter(Startup.slug == slug)
        .first()
    )
    if startup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Startup not found")

    detail = StartupDetail.model_validate(startup)
    if startup.founder is not None:
        detail.profiles = ProfileResponse.model_validate(startup.founder)
    return detail


@router.post("", response_model=StartupDetail, status_code=status.HTTP_201_CREATED)
def create_startup(
    payload: StartupCreate,
    founder: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Publish a new listing owned by the authenticated founder."""
    fields = payload.model_dump(exclude={"tags"})
    startup = Startup(
        slug=make_slug(payload.name),
        tags=list(normalize_tags(payload.tags)),
        founder_id=founder.id,
        likes=0,
        views=0,
        **fields,
    )
    db.add(startup)
    db.commit()
    db.refresh(startup)
    logger.info("Created startup %s for founder %s", startup.slug, founder.email)

    detail = StartupDetail.model_validate(startup)
    detail.profiles = ProfileResponse.model_validate(founder)
    return detail


# Field -> change description; None means "report old and new values"
CHANGE_LABELS = {
    "name": None,
    "short_description": "Short description changed.",
    "description": "Description changed.",
    "website_url": None,
    "funding_stage": None,
    "location": None,
    "account_details": "Account details changed.",
    "image_url": "Image URL changed.",
    "mission_statement": "Mission statement changed.",
    "problem_solution": "Problem/solution changed.",
    "founder_story": "Founder story changed.",
    "target_market": "Target market changed.",
    "traction": "Traction changed.",
    "use_of_funds": "Use of funds changed.",
    "milestones": "Milestones changed.",
    "team_profiles": "Team profiles changed.",
    "awards": "Awards changed.",
}


def describe_changes(startup: Startup, payload: StartupUpdate) -> List[str]:
    """Human-readable list of what an update would change."""
    changes: List[str] = []
    for field_name, label in CHANGE_LABELS.items():
        old = getattr(startup, field_name)
        new = getattr(payload, field_name)
        if (old or "") == (new or ""):
            continue
        if label is None:
            pretty = field_name.replace("_", " ").capitalize()
            changes.append(f'{pretty} changed from "{old or ""}" to "{new or ""}"')
        else:
            changes.append(label)
    if normalize_tags(startup.tags) != normalize_tags(payload.tags):
        changes.append("Tags changed.")
    return changes


@router.put("/{slug}", response_model=StartupUpdateResponse)
def update_startup(
    slug: str,
    payload: StartupUpdate,
    founder: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """
    Edit a listing owned by the authenticated founder.

    Returns the change list and how many followers the change concerns;
    notifying them is the email service's job.
    """
    startup = db.query(Startup).filter(Startup.slug == slug).first()
    if startup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Startup not found")
    if startup.founder_id != founder.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the founder can edit this startup")

    changes = describe_changes(startup, payload)
    if not changes and not payload.follower_message:
        return StartupUpdateResponse(message="No changes made")

    for field_name in CHANGE_LABELS:
        setattr(startup, field_name, getattr(payload, field_name))
    startup.tags = list(normalize_tags(payload.tags))
    db.commit()

    followers = db.query(Follow).filter(Follow.slug == slug).count()
    logger.info("Updated startup %s (%d changes, %d followers)", slug, len(changes), followers)
    return StartupUpdateResponse(
        message="Startup updated",
        changes=changes,
        followers_notified=followers,
    )
