"""
Recommendation query planner for startup listings.

Given a visitor's stored preferences (or request-level overrides) and an
optional text query, fetches candidate listings, attaches a composite
relevance score and returns them ranked. When nothing is known about the
visitor, or nothing matches their preferences, the planner widens the query
instead of failing.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
import logging

from app.core.config import settings
from app.models import Startup
from app.services.listing_query import (
    ListingFilter,
    ListingStore,
    POPULAR_FIRST,
    SortOrder,
    normalize_tags,
)
from app.utils.timing import now_ms, log_elapsed

logger = logging.getLogger(__name__)

# Composite score weights
W_MATCH = 0.5
W_LIKES = 0.2
W_VIEWS = 0.1
W_RECENCY = 0.2

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class ListingRequest:
    """Everything a caller may ask of the planner; all fields optional."""
    requester_email: Optional[str] = None
    text_query: Optional[str] = None
    stage_override: Optional[str] = None
    location_override: Optional[str] = None
    tags_override: Tuple[str, ...] = ()
    sort: Optional[SortOrder] = None

    def override_filter(self) -> ListingFilter:
        """Filter built from request-level values only (no stored preferences)."""
        return (
            ListingFilter()
            .with_stage(self.stage_override)
            .with_location(self.location_override)
            .with_tag_overlap(self.tags_override)
            .with_text_query(self.text_query)
            .with_sort(self.sort)
        )


@dataclass
class RankedListing:
    startup: Startup
    tags: Tuple[str, ...] = ()
    score: Optional[float] = None
    match_count: Optional[int] = None

    @property
    def is_scored(self) -> bool:
        return self.score is not None


@dataclass
class ScoreFactors:
    """Contributing factors for one candidate's composite score."""
    match_count: int = 0
    normalized_likes: float = 0.0
    normalized_views: float = 0.0
    recency: float = 0.0

    @property
    def total(self) -> float:
        return (
            W_MATCH * self.match_count
            + W_LIKES * self.normalized_likes
            + W_VIEWS * self.normalized_views
            + W_RECENCY * self.recency
        )


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def count_matches(listing_tags: Sequence[str], visitor_tags: Sequence[str]) -> int:
    """Size of the case-sensitive intersection of two tag sets."""
    return len(set(listing_tags) & set(visitor_tags))


def recency_score(created_at: Optional[datetime], now: datetime) -> float:
    """1 / (days since creation + 1); future timestamps count as created now."""
    if created_at is None:
        return 0.0
    elapsed = (_as_naive_utc(now) - _as_naive_utc(created_at)).total_seconds()
    days = max(elapsed, 0.0) / SECONDS_PER_DAY
    return 1.0 / (days + 1.0)


def _normalized(value: Optional[int], maximum: int) -> float:
    if maximum <= 0:
        return 0.0
    return (value or 0) / maximum


def score_candidates(
    candidates: Sequence[Startup],
    visitor_tags: Sequence[str],
    now: datetime,
) -> List[RankedListing]:
    """Attach a composite score to every candidate, preserving input order."""
    max_likes = max((c.likes or 0 for c in candidates), default=0)
    max_views = max((c.views or 0 for c in candidates), default=0)

    ranked: List[RankedListing] = []
    for candidate in candidates:
        tags = normalize_tags(candidate.tags)
        factors = ScoreFactors(
            match_count=count_matches(tags, visitor_tags),
            normalized_likes=_normalized(candidate.likes, max_likes),
            normalized_views=_normalized(candidate.views, max_views),
            recency=recency_score(candidate.created_at, now),
        )
        ranked.append(
            RankedListing(
                startup=candidate,
                tags=tags,
                score=factors.total,
                match_count=factors.match_count,
            )
        )
    return ranked


def _rank(ranked: List[RankedListing], sort: Optional[SortOrder]) -> List[RankedListing]:
    if sort is not None:
        # Backend already ordered by the requested column
        return ranked
    # sorted() is stable, so equal scores keep the fetch order
    return sorted(ranked, key=lambda r: r.score, reverse=True)


def _unscored(candidates: Sequence[Startup]) -> List[RankedListing]:
    return [RankedListing(startup=c, tags=normalize_tags(c.tags)) for c in candidates]


def get_ranked_listings(
    store: ListingStore,
    request: ListingRequest,
    now: Optional[datetime] = None,
) -> List[RankedListing]:
    """
    Produce the ordered listing sequence for a visitor.

    - No email, profile, preferences or preference tags: override-filtered
      listings in the requested order (recent first by default), unscored.
    - Otherwise: listings overlapping the visitor's tags (or the tag
      override), narrowed by effective stage/location and the text query,
      scored and ranked by score unless an explicit sort was requested.
    - If that yields nothing: every listing matching the text query, scored
      against the visitor's tags and ordered by score, or by the explicit
      sort when one was requested.
    """
    now = now or datetime.utcnow()
    t0 = now_ms()
    base = request.override_filter()

    preferences = None
    if request.requester_email:
        profile_id = store.get_profile_id(request.requester_email)
        if profile_id is not None:
            preferences = store.get_preferences(profile_id)

    visitor_tags = normalize_tags(preferences.tags) if preferences is not None else ()

    if not visitor_tags:
        logger.info(
            "No preference tags for %s, returning unfiltered listings",
            request.requester_email or "<anonymous>",
        )
        listings = store.fetch(base.retaining(stage=True, location=True, tags=True, text=True, sort=True))
        if settings.DEBUG:
            log_elapsed(t0, f"unfiltered_path count={len(listings)}", logger.debug)
        return _unscored(listings)

    personalized = (
        ListingFilter()
        .with_tag_overlap(request.tags_override or visitor_tags)
        .with_stage(request.stage_override or preferences.stage)
        .with_location(request.location_override or preferences.location)
        .with_text_query(request.text_query)
        .with_sort(request.sort)
        .with_default_order(POPULAR_FIRST)
    )
    candidates = store.fetch(personalized)
    if settings.DEBUG:
        t0 = log_elapsed(t0, f"personalized_fetch count={len(candidates)}", logger.debug)

    if not candidates:
        logger.info(
            "No listings match preferences for %s, falling back to broad fetch",
            request.requester_email,
        )
        candidates = store.fetch(personalized.retaining(text=True, sort=True))
        if settings.DEBUG:
            log_elapsed(t0, f"fallback_fetch count={len(candidates)}", logger.debug)

    ranked = _rank(score_candidates(candidates, visitor_tags, now), request.sort)
    logger.info(
        "Ranked %d listings for %s (sort=%s)",
        len(ranked),
        request.requester_email,
        request.sort.value if request.sort else "recommended",
    )
    return ranked
