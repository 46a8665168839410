"""
Filter values and storage access for startup listings.

A ``ListingFilter`` is an immutable description of which listings to fetch
and in what order. Each builder method returns a new filter, so the planner
can derive the personalized query and the broad fallback query from the same
request without sharing mutable query state. ``ListingStore`` compiles a
filter into a SQLAlchemy statement and runs it.
"""
from dataclasses import dataclass, replace, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import logging
import re
from uuid import UUID

from sqlalchemy import asc, cast, desc, exists, func, or_, select, String
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import BackendFetchError
from app.models import Profile, Startup, UserPreferences

logger = logging.getLogger(__name__)

TAG_DELIMITER = ","

TagsValue = Union[None, str, Iterable[str]]


def normalize_tags(value: TagsValue) -> Tuple[str, ...]:
    """
    Canonicalize a tags payload into an ordered tuple of trimmed, non-empty strings.

    Storage rows and form posts may carry tags either as a comma-delimited
    string or as a native array; both normalize identically. Duplicates are
    dropped, keeping the first occurrence.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        raw = value.split(TAG_DELIMITER)
    else:
        raw = list(value)

    seen = set()
    tags = []
    for item in raw:
        if item is None:
            continue
        tag = str(item).strip()
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tuple(tags)


def tokenize_query(text_query: str) -> Tuple[str, ...]:
    """Split a free-text query on whitespace runs."""
    return tuple(token for token in re.split(r"\s+", text_query) if token)


class SortOrder(str, Enum):
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"
    LIKES_ASC = "likes_asc"
    LIKES_DESC = "likes_desc"
    VIEWS_ASC = "views_asc"
    VIEWS_DESC = "views_desc"

    @property
    def column(self) -> str:
        return {
            "date": "created_at",
            "likes": "likes",
            "views": "views",
        }[self.value.split("_")[0]]

    @property
    def ascending(self) -> bool:
        return self.value.endswith("_asc")


def parse_sort(raw: Optional[str]) -> Optional[SortOrder]:
    """Map a sort parameter to a SortOrder; unknown values mean "no sort"."""
    if not raw:
        return None
    try:
        return SortOrder(raw.strip())
    except ValueError:
        logger.debug("Ignoring unrecognized sort value %r", raw)
        return None


# (column, ascending) pairs
OrderSpec = Tuple[Tuple[str, bool], ...]

RECENT_FIRST: OrderSpec = (("created_at", False),)
# Backend order for the personalized path; equal scores keep this order.
POPULAR_FIRST: OrderSpec = (("likes", False), ("views", False), ("created_at", False))


@dataclass(frozen=True)
class TextSearch:
    """Free-text predicate: name contains ``raw`` OR tags overlap ``tokens``."""
    raw: str
    tokens: Tuple[str, ...] = ()

    @classmethod
    def from_query(cls, text_query: str) -> "TextSearch":
        tokens = tokenize_query(text_query)
        if not tokens:
            # Whitespace-only input degrades to an empty substring match,
            # which every listing satisfies.
            return cls(raw="")
        return cls(raw=text_query, tokens=tokens)


@dataclass(frozen=True)
class ListingFilter:
    stage: Optional[str] = None
    location: Optional[str] = None
    tag_overlaps: Tuple[Tuple[str, ...], ...] = ()
    text: Optional[TextSearch] = None
    sort: Optional[SortOrder] = None
    founder_id: Optional[UUID] = None
    default_order: OrderSpec = field(default=RECENT_FIRST)

    def with_stage(self, stage: Optional[str]) -> "ListingFilter":
        return replace(self, stage=stage or None)

    def with_location(self, location: Optional[str]) -> "ListingFilter":
        return replace(self, location=location or None)

    def with_tag_overlap(self, tags: TagsValue) -> "ListingFilter":
        """Require listings to share at least one tag with ``tags``; empty sets are ignored."""
        normalized = normalize_tags(tags)
        if not normalized:
            return self
        return replace(self, tag_overlaps=self.tag_overlaps + (normalized,))

    def with_text_query(self, text_query: Optional[str]) -> "ListingFilter":
        if text_query is None:
            return self
        return replace(self, text=TextSearch.from_query(text_query))

    def with_sort(self, sort: Optional[SortOrder]) -> "ListingFilter":
        return replace(self, sort=sort)

    def with_founder(self, founder_id: Optional[UUID]) -> "ListingFilter":
        return replace(self, founder_id=founder_id)

    def with_default_order(self, order: OrderSpec) -> "ListingFilter":
        return replace(self, default_order=order)

    def retaining(
        self,
        stage: bool = False,
        location: bool = False,
        tags: bool = False,
        text: bool = False,
        sort: bool = False,
        founder: bool = False,
    ) -> "ListingFilter":
        """
        Broad fetch: a copy that keeps only the named filters and orders by
        recency unless the sort is retained.
        """
        return ListingFilter(
            stage=self.stage if stage else None,
            location=self.location if location else None,
            tag_overlaps=self.tag_overlaps if tags else (),
            text=self.text if text else None,
            sort=self.sort if sort else None,
            founder_id=self.founder_id if founder else None,
            default_order=RECENT_FIRST,
        )

    @property
    def order(self) -> OrderSpec:
        if self.sort is not None:
            return ((self.sort.column, self.sort.ascending),)
        return self.default_order


class ListingStore:
    """Read access to listings, profiles and preferences over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _is_postgres(self) -> bool:
        bind = self.db.get_bind()
        return bind.dialect.name == "postgresql"

    def _tags_overlap(self, tags: Sequence[str]):
        if self._is_postgres():
            # Column is varchar[]; an uncast literal is text[] and has no && operator
            literal = cast(postgresql.array(list(tags)), postgresql.ARRAY(String))
            return Startup.tags.op("&&", is_comparison=True)(literal)
        # JSON column: match any element of the stored array
        elements = func.json_each(Startup.tags).table_valued("value")
        return exists(select(1).select_from(elements).where(elements.c.value.in_(list(tags))))

    def build_statement(self, listing_filter: ListingFilter):
        stmt = select(Startup).options(selectinload(Startup.founder))

        if listing_filter.stage:
            stmt = stmt.where(Startup.funding_stage == listing_filter.stage)
        if listing_filter.location:
            stmt = stmt.where(Startup.location == listing_filter.location)
        if listing_filter.founder_id is not None:
            stmt = stmt.where(Startup.founder_id == listing_filter.founder_id)
        for tags in listing_filter.tag_overlaps:
            stmt = stmt.where(self._tags_overlap(tags))

        text = listing_filter.text
        if text is not None:
            name_match = Startup.name.icontains(text.raw, autoescape=True)
            if text.tokens:
                stmt = stmt.where(or_(name_match, self._tags_overlap(text.tokens)))
            else:
                stmt = stmt.where(name_match)

        for column_name, ascending in listing_filter.order:
            column = getattr(Startup, column_name)
            stmt = stmt.order_by(asc(column) if ascending else desc(column))
        return stmt

    def fetch(self, listing_filter: ListingFilter) -> List[Startup]:
        stmt = self.build_statement(listing_filter)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.exception("Listing fetch failed")
            raise BackendFetchError(str(e))

    def get_profile_id(self, email: str):
        try:
            return self.db.execute(
                select(Profile.id).where(Profile.email == email)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Profile lookup failed for %s", email)
            raise BackendFetchError(str(e))

    def get_preferences(self, profile_id) -> Optional[UserPreferences]:
        try:
            return self.db.execute(
                select(UserPreferences).where(UserPreferences.profile_id == profile_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Preferences lookup failed for profile %s", profile_id)
            raise BackendFetchError(str(e))
