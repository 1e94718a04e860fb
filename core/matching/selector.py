#!/usr/bin/env python3
"""
Candidate Selector - bounded, ranked candidate lists for a requester.

Pipeline for the primary mode:
1. Resolve the requester (NotFound if absent)
2. Coarse eligibility query, over-fetching overfetch_factor * limit rows
   plus one row per profile the requester already liked
3. Score every row with the compatibility scorer
4. Sort by score descending, candidate id ascending
5. Drop the requester and anything the requester already liked
6. Truncate to limit

Interest-only and location-only modes are simpler and unscored.
"""

import logging
from typing import Any, List, Optional, Set

from core.config_loader import ScorerConfig, SelectorConfig
from core.matching.compatibility import effective_max_distance, score_breakdown
from core.matching.errors import (
    DegradedSelection,
    InvalidInput,
    NotFound,
    TransientStoreFailure,
)
from core.matching.geo import coordinates_of
from core.matching.interfaces import AffinityLedger, ProfileDirectory
from core.matching.models import ScoredCandidate, SelectionOutcome

logger = logging.getLogger(__name__)


class CandidateSelector:
    """Selects and ranks candidate profiles for a requester."""

    def __init__(
        self,
        directory: ProfileDirectory,
        ledger: AffinityLedger,
        config: Optional[SelectorConfig] = None,
        scorer_config: Optional[ScorerConfig] = None
    ):
        self.directory = directory
        self.ledger = ledger
        self.config = config or SelectorConfig()
        self.scorer_config = scorer_config or ScorerConfig()

    def _validate_limit(self, limit: Any) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidInput(f"limit must be a positive integer, got {limit!r}")
        if limit > self.config.max_limit:
            raise InvalidInput(f"limit must be at most {self.config.max_limit}, got {limit}")
        return limit

    def _get_requester(self, requester_id: Any) -> Any:
        requester = self.directory.get_by_id(requester_id)
        if requester is None:
            raise NotFound(requester_id)
        return requester

    def _liked_ids(self, requester_id: Any) -> Set[Any]:
        return {edge.liked_id for edge in self.ledger.edges_from(requester_id)}

    def _fetch_size(self, limit: int, liked: Set[Any]) -> int:
        return limit * self.config.overfetch_factor + len(liked)

    def _rank(
        self,
        requester: Any,
        rows: List[Any],
        limit: int,
        liked: Set[Any]
    ) -> List[ScoredCandidate]:
        excluded = set(liked)
        excluded.add(requester.id)

        scored = []
        for candidate in rows:
            breakdown = score_breakdown(requester, candidate, self.scorer_config)
            scored.append(ScoredCandidate(
                profile=candidate,
                score=breakdown.total,
                breakdown=breakdown
            ))

        scored.sort(key=lambda c: (-c.score, c.profile.id))

        ranked = [c for c in scored if c.profile.id not in excluded]
        logger.debug(
            f"Ranked {len(scored)} candidates for {requester.id}: "
            f"{len(scored) - len(ranked)} excluded, returning {min(limit, len(ranked))}"
        )
        return ranked[:limit]

    def select(self, requester_id: Any, limit: Optional[int] = None) -> List[ScoredCandidate]:
        """
        Ranked candidates for requester_id.

        Args:
            requester_id: Profile id of the requester
            limit: Maximum candidates to return (default from config)

        Returns:
            List of ScoredCandidate, best first

        Raises:
            NotFound: requester does not exist
            InvalidInput: limit is not a positive integer
            TransientStoreFailure: the directory or ledger failed
        """
        limit = self._validate_limit(self.config.default_limit if limit is None else limit)
        requester = self._get_requester(requester_id)

        liked = self._liked_ids(requester.id)
        rows = self.directory.query_eligible(requester, self._fetch_size(limit, liked))
        if not rows:
            return []

        return self._rank(requester, rows, limit, liked)

    def select_loose(self, requester_id: Any, limit: Optional[int] = None) -> List[ScoredCandidate]:
        """
        Degraded-mode selection: one-sided gender/age filter, no reciprocal check.

        Results are scored, ranked and filtered like select().
        """
        limit = self._validate_limit(self.config.default_limit if limit is None else limit)
        requester = self._get_requester(requester_id)

        liked = self._liked_ids(requester.id)
        rows = self.directory.query_loose(requester, self._fetch_size(limit, liked))
        if not rows:
            return []

        return self._rank(requester, rows, limit, liked)

    def select_with_fallback(
        self,
        requester_id: Any,
        limit: Optional[int] = None
    ) -> SelectionOutcome:
        """
        Primary selection, falling back to the loose filter when the primary
        query path fails with a store error.

        Terminal errors (NotFound, InvalidInput) are never masked.
        """
        try:
            return SelectionOutcome(candidates=self.select(requester_id, limit))
        except (NotFound, InvalidInput):
            raise
        except TransientStoreFailure as e:
            if not self.config.allow_degraded_fallback:
                raise
            cause = e

        logger.warning(
            f"Primary candidate query failed for {requester_id}, using degraded selection: {cause}"
        )
        candidates = self.select_loose(requester_id, limit)
        return SelectionOutcome(
            candidates=candidates,
            degraded=DegradedSelection(reason=str(cause), cause=cause)
        )

    def select_by_interest(self, requester_id: Any, limit: Optional[int] = None) -> List[Any]:
        """
        Profiles sharing at least one interest with the requester.

        Unordered beyond the directory's natural order. Empty requester
        interests yield an empty list.
        """
        limit = self._validate_limit(self.config.auxiliary_limit if limit is None else limit)
        requester = self._get_requester(requester_id)

        interests = list(requester.interests or [])
        if not interests:
            return []

        liked = self._liked_ids(requester.id)
        rows = self.directory.query_by_interest_overlap(
            interests, requester.id, limit + len(liked)
        )
        return [p for p in rows if p.id != requester.id and p.id not in liked][:limit]

    def select_by_location(self, requester_id: Any, limit: Optional[int] = None) -> List[Any]:
        """
        Profiles near the requester.

        Radius search (nearest first) when the requester has valid
        coordinates, followed by same-label profiles that have no
        coordinates. Exact location-label match when the requester has no
        coordinates, empty when the requester carries neither.
        """
        limit = self._validate_limit(self.config.auxiliary_limit if limit is None else limit)
        requester = self._get_requester(requester_id)

        liked = self._liked_ids(requester.id)
        fetch = limit + len(liked)

        def keep(rows):
            return [p for p in rows if p.id != requester.id and p.id not in liked]

        origin = coordinates_of(requester)
        if not (origin and self.config.radius_search_enabled):
            if not requester.location:
                return []
            return keep(self.directory.query_by_location_label(
                requester.location, requester.id, fetch
            ))[:limit]

        radius = effective_max_distance(requester, self.scorer_config.default_max_distance_km)
        nearby = keep(self.directory.query_within_radius(
            origin[0], origin[1], radius, requester.id, fetch
        ))
        if len(nearby) >= limit or not requester.location:
            return nearby[:limit]

        # Same label, no coordinates: distance unknown
        unplaced = keep(self.directory.query_by_location_label(
            requester.location, requester.id, fetch, without_coordinates=True
        ))
        return (nearby + unplaced)[:limit]


