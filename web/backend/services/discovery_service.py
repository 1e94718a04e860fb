#!/usr/bin/env python3
"""
Discovery service - route-facing wrapper around the MatchingService.

Read-only operations are retried with exponential backoff on
TransientStoreFailure. Likes are never retried: a retried insert could
report AlreadyLiked for the caller's own first attempt.
"""

import logging
from typing import Any, Callable, List, Optional

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config_loader import RetryConfig
from core.matching import (
    CompatibilityBreakdown,
    LikeResult,
    MatchingService,
    ScoredCandidate,
    TransientStoreFailure,
)
from ..models.responses import (
    CandidateSummary,
    CompatibilityResponse,
    DiscoverResponse,
    LikeResponse,
    LikeSummary,
    MatchesResponse,
    ProfileSummary,
    ProfilesResponse,
    ScoreBreakdown,
)
from ..utils import safe_datetime_iso, safe_list

logger = logging.getLogger(__name__)


def to_profile_summary(profile: Any) -> ProfileSummary:
    return ProfileSummary(
        id=profile.id,
        display_name=profile.display_name,
        age=profile.age,
        gender=profile.gender,
        gender_preference=profile.gender_preference,
        bio=profile.bio,
        location=profile.location,
        interests=safe_list(profile.interests),
        is_premium=bool(profile.is_premium),
        last_active_at=safe_datetime_iso(profile.last_active_at)
    )


def to_score_breakdown(breakdown: CompatibilityBreakdown) -> ScoreBreakdown:
    return ScoreBreakdown(
        interests=breakdown.interests,
        age=breakdown.age,
        location=breakdown.location,
        activity=breakdown.activity,
        total=breakdown.total,
        shared_interests=list(breakdown.shared_interests),
        distance_km=round(breakdown.distance_km, 2) if breakdown.distance_km is not None else None
    )


def to_candidate_summary(candidate: ScoredCandidate) -> CandidateSummary:
    summary = to_profile_summary(candidate.profile)
    return CandidateSummary(
        **summary.model_dump(),
        compatibility_score=candidate.score,
        score_breakdown=to_score_breakdown(candidate.breakdown) if candidate.breakdown else None
    )


class DiscoveryService:
    """Service for discovery, likes and matches."""

    def __init__(
        self,
        matching: MatchingService,
        retry_config: Optional[RetryConfig] = None,
        activity_tracker: Optional[Callable[[Any], None]] = None
    ):
        self.matching = matching
        self.retry_config = retry_config or RetryConfig()
        self.activity_tracker = activity_tracker

    def _read(self, fn: Callable, *args):
        """Run a read-only call, retrying transient store failures."""
        retrying = Retrying(
            retry=retry_if_exception_type(TransientStoreFailure),
            stop=stop_after_attempt(self.retry_config.attempts),
            wait=wait_exponential(
                multiplier=self.retry_config.initial_wait_seconds,
                max=self.retry_config.max_wait_seconds
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        return retrying(fn, *args)

    def _track_activity(self, user_id: Any) -> None:
        if self.activity_tracker is None:
            return
        try:
            self.activity_tracker(user_id)
        except TransientStoreFailure as e:
            logger.warning(f"Could not update last activity for {user_id}: {e}")

    def discover(self, user_id: Any, limit: Optional[int] = None) -> DiscoverResponse:
        """
        Ranked candidates for user_id.

        Falls back to the degraded (non-reciprocal) filter when the primary
        query fails; the response is flagged instead of failing.
        """
        outcome = self._read(self.matching.select_candidates_with_fallback, user_id, limit)
        self._track_activity(user_id)

        if outcome.is_degraded:
            logger.warning(f"Serving degraded discovery for {user_id}: {outcome.degraded.reason}")

        candidates = [to_candidate_summary(c) for c in outcome.candidates]
        return DiscoverResponse(
            success=True,
            count=len(candidates),
            degraded=outcome.is_degraded,
            degraded_reason=outcome.degraded.reason if outcome.degraded else None,
            candidates=candidates
        )

    def discover_by_interest(self, user_id: Any, limit: Optional[int] = None) -> ProfilesResponse:
        profiles = self._read(self.matching.select_by_interest, user_id, limit)
        return self._profiles_response(profiles)

    def discover_by_location(self, user_id: Any, limit: Optional[int] = None) -> ProfilesResponse:
        profiles = self._read(self.matching.select_by_location, user_id, limit)
        return self._profiles_response(profiles)

    def _profiles_response(self, profiles: List[Any]) -> ProfilesResponse:
        summaries = [to_profile_summary(p) for p in profiles]
        return ProfilesResponse(success=True, count=len(summaries), profiles=summaries)

    def like(self, liker_id: Any, liked_id: Any) -> LikeResponse:
        result: LikeResult = self.matching.record_like(liker_id, liked_id)
        edge = result.edge
        return LikeResponse(
            success=True,
            like=LikeSummary(
                id=edge.id,
                liker_id=edge.liker_id,
                liked_id=edge.liked_id,
                created_at=safe_datetime_iso(edge.created_at)
            ),
            edge_created=result.edge_created,
            is_match=result.is_match,
            matched_profile=to_profile_summary(result.matched_profile) if result.matched_profile else None
        )

    def matches(self, user_id: Any) -> MatchesResponse:
        profiles = self._read(self.matching.get_matches, user_id)
        summaries = [to_profile_summary(p) for p in profiles]
        return MatchesResponse(success=True, count=len(summaries), matches=summaries)

    def compatibility(self, user_id: Any, other_id: Any) -> CompatibilityResponse:
        breakdown = self._read(self.matching.score, user_id, other_id)
        return CompatibilityResponse(
            success=True,
            requester_id=user_id,
            candidate_id=other_id,
            breakdown=to_score_breakdown(breakdown)
        )
