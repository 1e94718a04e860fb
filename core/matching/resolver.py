#!/usr/bin/env python3
"""
Match Resolver - like recording and mutual-match detection.

Per ordered pair (A, B) the state moves NoEdge -> OneWay(A->B) -> Mutual.
The Mutual transition is detected synchronously: the new edge is committed
first, then the reverse edge is read. A concurrent like in the opposite
direction therefore sees at least one of the two edges, so both calls can
never report is_match=False.

Matches are derived on read from the edge set and never stored.
"""

import logging
from typing import Any, Callable, List, Optional

from core.matching.errors import AlreadyLiked, InvalidInput, NotFound
from core.matching.interfaces import AffinityLedger, ProfileDirectory
from core.matching.models import LikeResult, MatchEvent

logger = logging.getLogger(__name__)

MatchListener = Callable[[MatchEvent], None]


def log_match_event(event: MatchEvent) -> None:
    logger.info(f"New match between profiles {event.liker.id} and {event.liked.id}")


class MatchResolver:
    """Records likes and resolves mutual matches."""

    def __init__(
        self,
        directory: ProfileDirectory,
        ledger: AffinityLedger,
        listeners: Optional[List[MatchListener]] = None
    ):
        self.directory = directory
        self.ledger = ledger
        self.listeners: List[MatchListener] = (
            list(listeners) if listeners is not None else [log_match_event]
        )

    def add_listener(self, listener: MatchListener) -> None:
        self.listeners.append(listener)

    def _require(self, profile_id: Any) -> Any:
        profile = self.directory.get_by_id(profile_id)
        if profile is None:
            raise NotFound(profile_id)
        return profile

    def _dispatch(self, event: MatchEvent) -> None:
        for listener in self.listeners:
            try:
                listener(event)
            except Exception as e:
                # Edge is committed; listener errors never propagate
                logger.error(f"Match listener {listener!r} failed: {e}", exc_info=True)

    def record_like(self, liker_id: Any, liked_id: Any) -> LikeResult:
        """
        Record that liker_id likes liked_id and report whether it made a match.

        Args:
            liker_id: Profile expressing interest
            liked_id: Profile receiving interest

        Returns:
            LikeResult with is_match and, on match, matched_profile

        Raises:
            InvalidInput: liker_id == liked_id
            NotFound: either profile does not exist
            AlreadyLiked: the ordered pair already has an edge
        """
        if liker_id == liked_id:
            raise InvalidInput("A profile cannot like itself")

        liker = self._require(liker_id)
        liked = self._require(liked_id)

        if self.ledger.has_edge(liker.id, liked.id):
            raise AlreadyLiked(liker.id, liked.id)

        # Raises AlreadyLiked if a concurrent request won the insert
        edge = self.ledger.create_edge(liker.id, liked.id)

        is_match = self.ledger.has_edge(liked.id, liker.id)
        logger.info(f"Profile {liker.id} liked {liked.id} (match={is_match})")

        if is_match:
            self._dispatch(MatchEvent(liker=liker, liked=liked, edge=edge))

        return LikeResult(
            edge=edge,
            edge_created=True,
            is_match=is_match,
            matched_profile=liked if is_match else None
        )

    def get_matches(self, user_id: Any) -> List[Any]:
        """
        Profiles that share a mutual like with user_id, in the order
        user_id liked them. No duplicates, never user_id itself.
        """
        user = self._require(user_id)

        liked_back = {edge.liker_id for edge in self.ledger.edges_to(user.id)}

        seen = set()
        mutual_ids = []
        for edge in self.ledger.edges_from(user.id):
            other = edge.liked_id
            if other == user.id or other in seen or other not in liked_back:
                continue
            seen.add(other)
            mutual_ids.append(other)

        if not mutual_ids:
            return []
        return self.directory.get_many(mutual_ids)

    def is_match(self, first_id: Any, second_id: Any) -> bool:
        """True when both directed edges exist between the two profiles."""
        if first_id == second_id:
            return False
        return self.ledger.has_edge(first_id, second_id) and self.ledger.has_edge(second_id, first_id)
