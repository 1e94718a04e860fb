#!/usr/bin/env python3
"""
Compatibility Scorer - multi-factor score between two profiles.

Weighted sum of four independent subscores, each capped at its weight:
- Interests: Jaccard overlap of interest tags (40)
- Age: linear decay over the age band (20)
- Location: Haversine proximity, else label equality, else optimistic (20)
- Activity: fixed constant, no behavioural model (20)

The total is clamped to [0, 100]. Scoring is pure and never raises;
malformed numeric fields are treated as unknown.
"""

import math
from typing import Any, List, Optional, Tuple

from core.config_loader import ScorerConfig
from core.matching.geo import coordinates_of, haversine_km
from core.matching.models import CompatibilityBreakdown

DEFAULT_SCORER_CONFIG = ScorerConfig()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _interests_of(profile: Any) -> List[str]:
    interests = getattr(profile, 'interests', None)
    if not interests:
        return []
    return [i for i in interests if isinstance(i, str)]


def shared_interests(requester: Any, candidate: Any) -> List[str]:
    """Interests present on both profiles, in the requester's display order."""
    candidate_set = set(_interests_of(candidate))
    seen = set()
    shared = []
    for interest in _interests_of(requester):
        if interest in candidate_set and interest not in seen:
            seen.add(interest)
            shared.append(interest)
    return shared


def interest_subscore(requester: Any, candidate: Any, weight: int) -> Tuple[int, List[str]]:
    shared = shared_interests(requester, candidate)
    union = set(_interests_of(requester)) | set(_interests_of(candidate))
    if not union:
        return 0, shared
    return _clamp(round_half_up(weight * len(shared) / len(union)), 0, weight), shared


def _age_of(profile: Any) -> Optional[int]:
    age = getattr(profile, 'age', None)
    if isinstance(age, bool) or not isinstance(age, (int, float)):
        return None
    if not math.isfinite(age):
        return None
    return int(age)


def age_subscore(requester: Any, candidate: Any, weight: int, band_years: int) -> int:
    a, b = _age_of(requester), _age_of(candidate)
    if a is None or b is None:
        return weight
    difference = abs(a - b)
    return _clamp(weight - round_half_up(weight * difference / band_years), 0, weight)


def effective_max_distance(profile: Any, default_km: int) -> float:
    """Profile max distance in km; missing or non-positive values give default_km."""
    value = getattr(profile, 'max_distance', None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default_km
    if not math.isfinite(value) or value <= 0:
        return default_km
    return value


def distance_subscore(distance_km: float, max_distance_km: float, weight: int) -> int:
    """Full weight at zero distance, decaying linearly to 0 at max_distance_km."""
    if distance_km > max_distance_km:
        return 0
    return _clamp(round_half_up(weight * (1 - distance_km / max_distance_km)), 0, weight)


def location_subscore(
    requester: Any,
    candidate: Any,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG
) -> Tuple[int, Optional[float]]:
    weight = config.location_weight
    origin = coordinates_of(requester)
    target = coordinates_of(candidate)

    if origin and target:
        distance = haversine_km(
            origin[0], origin[1], target[0], target[1],
            radius_km=config.earth_radius_km
        )
        max_distance = min(
            effective_max_distance(requester, config.default_max_distance_km),
            effective_max_distance(candidate, config.default_max_distance_km)
        )
        return distance_subscore(distance, max_distance, weight), distance

    label_a = getattr(requester, 'location', None)
    label_b = getattr(candidate, 'location', None)
    if label_a and label_b:
        return (weight if label_a == label_b else 0), None

    # Unknown location is treated as compatible
    return weight, None


def score_breakdown(
    requester: Any,
    candidate: Any,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG
) -> CompatibilityBreakdown:
    """
    Compute every subscore and the clamped total for a profile pair.

    Args:
        requester: The profile asking for candidates
        candidate: The profile being scored
        config: Scorer weights and constants

    Returns:
        CompatibilityBreakdown with per-factor values
    """
    interests, shared = interest_subscore(requester, candidate, config.interests_weight)
    age = age_subscore(requester, candidate, config.age_weight, config.age_band_years)
    location, distance = location_subscore(requester, candidate, config)
    activity = config.activity_weight

    total = _clamp(interests + age + location + activity, 0, 100)

    return CompatibilityBreakdown(
        interests=interests,
        age=age,
        location=location,
        activity=activity,
        total=total,
        shared_interests=shared,
        distance_km=distance
    )


def calculate_compatibility(
    requester: Any,
    candidate: Any,
    config: ScorerConfig = DEFAULT_SCORER_CONFIG
) -> int:
    """Integer compatibility score in [0, 100]."""
    return score_breakdown(requester, candidate, config).total
