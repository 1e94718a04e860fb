#!/usr/bin/env python3
"""
Matching Models - Data structures for matching results.
"""

from typing import List, Optional, Any
from dataclasses import dataclass, field

from database.models import Profile, Like
from core.matching.errors import DegradedSelection


@dataclass(frozen=True)
class CompatibilityBreakdown:
    """Per-factor subscores; total is the clamped sum."""
    interests: int = 0
    age: int = 0
    location: int = 0
    activity: int = 0
    total: int = 0
    shared_interests: List[str] = field(default_factory=list)
    distance_km: Optional[float] = None


@dataclass
class ScoredCandidate:
    """A profile surfaced to a requester, with its compatibility score."""
    profile: Profile
    score: int
    breakdown: Optional[CompatibilityBreakdown] = None

    @property
    def profile_id(self) -> Any:
        return self.profile.id


@dataclass
class SelectionOutcome:
    """Ranked candidates plus the degraded-mode signal when the fallback ran."""
    candidates: List[ScoredCandidate] = field(default_factory=list)
    degraded: Optional[DegradedSelection] = None

    @property
    def is_degraded(self) -> bool:
        return self.degraded is not None


@dataclass
class LikeResult:
    """Outcome of recording a like."""
    edge: Like
    edge_created: bool = True
    is_match: bool = False
    matched_profile: Optional[Profile] = None


@dataclass(frozen=True)
class MatchEvent:
    """Fired when a like turns a one-way pair into a mutual match."""
    liker: Profile
    liked: Profile
    edge: Like
