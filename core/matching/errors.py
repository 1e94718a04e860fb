#!/usr/bin/env python3
"""
Matching Errors - failure taxonomy for the matching engine.

NotFound, AlreadyLiked and InvalidInput are terminal and are surfaced to the
caller for user-facing messaging. TransientStoreFailure may be retried by the
caller; the engine never retries on its own. DegradedSelection is a signal
attached to a selection outcome, never raised.
"""

from dataclasses import dataclass
from typing import Any, Optional


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    pass


class NotFound(MatchingError):
    """Raised when a referenced profile does not exist."""

    def __init__(self, profile_id: Any):
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id} not found")


class AlreadyLiked(MatchingError):
    """Raised when a like edge already exists for the ordered pair."""

    def __init__(self, liker_id: Any, liked_id: Any):
        self.liker_id = liker_id
        self.liked_id = liked_id
        super().__init__(f"Profile {liker_id} already liked profile {liked_id}")


class InvalidInput(MatchingError):
    """Raised for malformed limits, non-adult ages, inverted age ranges."""
    pass


class TransientStoreFailure(MatchingError):
    """Raised when the directory or ledger times out or loses its connection."""
    pass


@dataclass
class DegradedSelection:
    """
    Signal that the primary eligibility query failed and the looser
    fallback filter produced the result.
    """
    reason: str
    cause: Optional[BaseException] = None
