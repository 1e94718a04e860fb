#!/usr/bin/env python3
"""
Matching Service - facade over the scorer, selector and resolver.

This is the surface the route layer calls. It holds no state of its own
beyond its collaborators and never mutates profiles.
"""

import logging
from typing import Any, List, Optional

from core.config_loader import MatchingConfig
from core.matching.compatibility import score_breakdown
from core.matching.errors import NotFound
from core.matching.interfaces import AffinityLedger, ProfileDirectory
from core.matching.models import (
    CompatibilityBreakdown,
    LikeResult,
    ScoredCandidate,
    SelectionOutcome,
)
from core.matching.resolver import MatchListener, MatchResolver
from core.matching.selector import CandidateSelector

logger = logging.getLogger(__name__)


class MatchingService:
    """
    Candidate matching and compatibility scoring.

    Runs against any ProfileDirectory/AffinityLedger pair.
    """

    def __init__(
        self,
        directory: ProfileDirectory,
        ledger: AffinityLedger,
        config: Optional[MatchingConfig] = None,
        listeners: Optional[List[MatchListener]] = None
    ):
        self.config = config or MatchingConfig()
        self.directory = directory
        self.ledger = ledger
        self.selector = CandidateSelector(
            directory, ledger,
            config=self.config.selector,
            scorer_config=self.config.scorer
        )
        self.resolver = MatchResolver(directory, ledger, listeners=listeners)

    def score(self, requester_id: Any, candidate_id: Any) -> CompatibilityBreakdown:
        requester = self.directory.get_by_id(requester_id)
        if requester is None:
            raise NotFound(requester_id)
        candidate = self.directory.get_by_id(candidate_id)
        if candidate is None:
            raise NotFound(candidate_id)
        return score_breakdown(requester, candidate, self.config.scorer)

    def select_candidates(self, requester_id: Any, limit: Optional[int] = None) -> List[ScoredCandidate]:
        return self.selector.select(requester_id, limit)

    def select_candidates_with_fallback(
        self,
        requester_id: Any,
        limit: Optional[int] = None
    ) -> SelectionOutcome:
        return self.selector.select_with_fallback(requester_id, limit)

    def select_by_interest(self, requester_id: Any, limit: Optional[int] = None) -> List[Any]:
        return self.selector.select_by_interest(requester_id, limit)

    def select_by_location(self, requester_id: Any, limit: Optional[int] = None) -> List[Any]:
        return self.selector.select_by_location(requester_id, limit)

    def record_like(self, liker_id: Any, liked_id: Any) -> LikeResult:
        return self.resolver.record_like(liker_id, liked_id)

    def get_matches(self, user_id: Any) -> List[Any]:
        return self.resolver.get_matches(user_id)
