"""
Like, view and follow endpoints for startup listings.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.models import Follow, Startup
from app.schemas.startup import SlugRequest
from app.core.auth import get_current_email

logger = logging.getLogger(__name__)
router = APIRouter(tags=["engagement"])


def _require_startup(db: Session, payload: SlugRequest) -> Startup:
    if not payload.slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="slug is required")
    startup = db.query(Startup).filter(Startup.slug == payload.slug).first()
    if startup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return startup


@router.post("/like")
def like_startup(payload: SlugRequest, db: Session = Depends(get_db)):
    startup = _require_startup(db, payload)
    startup.likes = Startup.likes + 1
    db.commit()
    db.refresh(startup)
    return {"likes": startup.likes}


@router.post("/view")
def view_startup(payload: SlugRequest, db: Session = Depends(get_db)):
    startup = _require_startup(db, payload)
    startup.views = Startup.views + 1
    db.commit()
    db.refresh(startup)
    return {"views": startup.views}


@router.post("/follow")
def follow_startup(
    payload: SlugRequest,
    email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
):
    """Follow a listing's updates; following twice is a 409."""
    startup = _require_startup(db, payload)

    existing = db.query(Follow).filter(Follow.email == email, Follow.slug == startup.slug).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already following this startup")

    db.add(Follow(email=email, slug=startup.slug))
    db.commit()
    logger.info("%s followed %s", email, startup.slug)
    return {"message": "Followed successfully"}
