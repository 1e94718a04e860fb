#!/usr/bin/env python3
"""
Matching Module - candidate selection, compatibility scoring, match resolution.

Public API:
- MatchingService: Facade used by the route layer
- CandidateSelector: Ranked and auxiliary candidate selection
- MatchResolver: Like recording and mutual-match detection
- calculate_compatibility / score_breakdown: Pure compatibility scorer

Modules:
- models.py: Data structures (ScoredCandidate, LikeResult, ...)
- errors.py: Failure taxonomy
- interfaces.py: ProfileDirectory / AffinityLedger contracts
- geo.py: Haversine distance and radius prefilter boxes
- compatibility.py: Scorer
- selector.py: CandidateSelector
- resolver.py: MatchResolver
- service.py: MatchingService
"""

from core.matching.compatibility import calculate_compatibility, score_breakdown
from core.matching.errors import (
    AlreadyLiked,
    DegradedSelection,
    InvalidInput,
    MatchingError,
    NotFound,
    TransientStoreFailure,
)
from core.matching.models import (
    CompatibilityBreakdown,
    LikeResult,
    MatchEvent,
    ScoredCandidate,
    SelectionOutcome,
)
from core.matching.resolver import MatchResolver
from core.matching.selector import CandidateSelector
from core.matching.service import MatchingService

__all__ = [
    'MatchingService',
    'CandidateSelector',
    'MatchResolver',
    'calculate_compatibility',
    'score_breakdown',
    'CompatibilityBreakdown',
    'LikeResult',
    'MatchEvent',
    'ScoredCandidate',
    'SelectionOutcome',
    'MatchingError',
    'NotFound',
    'AlreadyLiked',
    'InvalidInput',
    'TransientStoreFailure',
    'DegradedSelection',
]
