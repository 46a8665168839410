"""
Threaded comments and comment voting for startup listings.
"""
from collections import defaultdict
from typing import Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session, selectinload

from app.models import Comment, CommentVote
from app.schemas.comment import CommentNode

logger = logging.getLogger(__name__)


def _sort_key(node: CommentNode):
    # Most-voted first, newest first among equals
    return (-node.votes, -node.created_at.timestamp())


def build_comment_tree(comments: List[Comment], viewer_id: Optional[UUID] = None) -> List[CommentNode]:
    """
    Arrange flat comment rows into a reply tree.

    Each node carries the sum of its votes and the viewer's own vote (0 when
    the viewer has not voted or is anonymous). Comments whose parent is not in
    ``comments`` are treated as top-level.
    """
    nodes: Dict[UUID, CommentNode] = {}
    for comment in comments:
        votes = sum(v.vote_type for v in comment.votes)
        user_vote = 0
        if viewer_id is not None:
            for v in comment.votes:
                if v.user_id == viewer_id:
                    user_vote = v.vote_type
                    break
        author = comment.author
        nodes[comment.id] = CommentNode(
            id=str(comment.id),
            content=comment.content,
            created_at=comment.created_at,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            author_name=author.full_name if author else None,
            author_avatar_url=author.avatar_url if author else None,
            votes=votes,
            user_vote=user_vote,
        )

    children: Dict[Optional[UUID], List[CommentNode]] = defaultdict(list)
    for comment in comments:
        parent = comment.parent_id if comment.parent_id in nodes else None
        children[parent].append(nodes[comment.id])

    def attach(parent_id: Optional[UUID]) -> List[CommentNode]:
        level = sorted(children.get(parent_id, []), key=_sort_key)
        for node in level:
            node.replies = attach(UUID(node.id))
        return level

    return attach(None)


def load_comments(db: Session, startup_id: UUID) -> List[Comment]:
    return (
        db.query(Comment)
        .options(selectinload(Comment.votes), selectinload(Comment.author))
        .filter(Comment.startup_id == startup_id)
        .all()
    )


def apply_vote(db: Session, comment: Comment, user_id: UUID, vote_type: int) -> int:
    """
    Toggle a vote and return the viewer's resulting vote.

    Repeating the same vote removes it; the opposite vote replaces it.
    Does not commit.
    """
    existing = (
        db.query(CommentVote)
        .filter(CommentVote.comment_id == comment.id, CommentVote.user_id == user_id)
        .first()
    )
    if existing is not None and existing.vote_type == vote_type:
        db.delete(existing)
        db.flush()
        return 0
    if existing is not None:
        existing.vote_type = vote_type
    else:
        db.add(CommentVote(comment_id=comment.id, user_id=user_id, vote_type=vote_type))
    db.flush()
    return vote_type


def total_votes(db: Session, comment_id: UUID) -> int:
    rows = db.query(CommentVote.vote_type).filter(CommentVote.comment_id == comment_id).all()
    return sum(row[0] for row in rows)
