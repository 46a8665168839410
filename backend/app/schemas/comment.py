from __future__ import annotations

from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime


class CommentCreate(BaseModel):
    content: str
    parent_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


class CommentNode(BaseModel):
    id: str
    content: str
    created_at: datetime
    parent_id: Optional[str] = None
    author_name: Optional[str] = None
    author_avatar_url: Optional[str] = None
    votes: int = 0
    user_vote: int = 0
    replies: List[CommentNode] = []


class VoteRequest(BaseModel):
    vote_type: Literal[1, -1]


class VoteResponse(BaseModel):
    comment_id: str
    votes: int
    user_vote: int


CommentNode.model_rebuild()
