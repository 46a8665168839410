from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.database import get_db
from app.models import Comment, Profile, Startup
from app.schemas.comment import CommentCreate, CommentNode, VoteRequest, VoteResponse
from app.services import discussion
from app.core.auth import get_current_profile

logger = logging.getLogger(__name__)
router = APIRouter(tags=["comments"])


def _parse_uuid(value: str, what: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


def _require_startup(db: Session, slug: str) -> Startup:
    startup = db.query(Startup).filter(Startup.slug == slug).first()
    if startup is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Startup not found")
    return startup


@router.get("/startup/{slug}/comments", response_model=List[CommentNode])
def list_comments(
    slug: str,
    email: Optional[str] = Query(None, description="Viewer email, used to report their own votes"),
    db: Session = Depends(get_db),
):
    startup = _require_startup(db, slug)
    viewer_id = None
    if email:
        viewer_id = db.query(Profile.id).filter(Profile.email == email).scalar()
    return discussion.build_comment_tree(discussion.load_comments(db, startup.id), viewer_id)


@router.post("/startup/{slug}/comments", response_model=CommentNode, status_code=status.HTTP_201_CREATED)
def post_comment(
    slug: str,
    payload: CommentCreate,
    author: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Post a top-level comment or, with ``parent_id``, a reply."""
    startup = _require_startup(db, slug)

    parent_id = None
    if payload.parent_id:
        parent_id = _parse_uuid(payload.parent_id, "Parent comment")
        parent = db.query(Comment).filter(Comment.id == parent_id).first()
        if parent is None or parent.startup_id != startup.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent comment not found on this startup")

    comment = Comment(
        startup_id=startup.id,
        user_id=author.id,
        parent_id=parent_id,
        content=payload.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s posted on %s by %s", comment.id, slug, author.email)

    return CommentNode(
        id=str(comment.id),
        content=comment.content,
        created_at=comment.created_at,
        parent_id=str(parent_id) if parent_id else None,
        author_name=author.full_name,
        author_avatar_url=author.avatar_url,
    )


@router.post("/comments/{comment_id}/vote", response_model=VoteResponse)
def vote_comment(
    comment_id: str,
    payload: VoteRequest,
    voter: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Upvote or downvote; repeating a vote withdraws it."""
    comment = db.query(Comment).filter(Comment.id == _parse_uuid(comment_id, "Comment")).first()
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    user_vote = discussion.apply_vote(db, comment, voter.id, payload.vote_type)
    db.commit()
    return VoteResponse(
        comment_id=str(comment.id),
        votes=discussion.total_votes(db, comment.id),
        user_vote=user_vote,
    )
