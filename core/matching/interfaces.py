"""
Matching Collaborator Interfaces - contracts the matching engine consumes.

The engine only reads profiles and only appends like edges. Implementations
live in database.repositories; tests use in-memory fakes.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence


class ProfileDirectory(ABC):
    """
    Abstract Interface for the profile store.
    """

    @abstractmethod
    def get_by_id(self, profile_id: Any) -> Optional[Any]:
        """Return the profile or None."""
        pass

    @abstractmethod
    def get_many(self, profile_ids: Sequence[Any]) -> List[Any]:
        """Return the profiles that exist, in the order of profile_ids."""
        pass

    @abstractmethod
    def query_eligible(self, requester: Any, limit: int) -> List[Any]:
        """
        Coarse eligibility filter.

        Candidate gender == requester preference AND requester gender ==
        candidate preference AND each age is inside the other's accepted
        range AND candidate id != requester id. Not score-ordered.
        """
        pass

    @abstractmethod
    def query_loose(self, requester: Any, limit: int) -> List[Any]:
        """
        Degraded filter: candidate gender == requester preference and
        candidate age inside the requester's range. No reciprocal check.
        """
        pass

    @abstractmethod
    def query_by_interest_overlap(
        self, interests: Sequence[str], exclude_id: Any, limit: int
    ) -> List[Any]:
        """Profiles sharing at least one interest tag, in directory order."""
        pass

    @abstractmethod
    def query_by_location_label(
        self,
        label: str,
        exclude_id: Any,
        limit: int,
        without_coordinates: bool = False
    ) -> List[Any]:
        """Profiles whose location label equals label exactly, optionally only those lacking coordinates."""
        pass

    @abstractmethod
    def query_within_radius(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        exclude_id: Any,
        limit: int
    ) -> List[Any]:
        """Profiles with coordinates within radius_km, nearest first."""
        pass


class AffinityLedger(ABC):
    """
    Abstract Interface for the like-edge store.

    Guarantees at most one edge per ordered pair.
    """

    @abstractmethod
    def has_edge(self, liker_id: Any, liked_id: Any) -> bool:
        pass

    @abstractmethod
    def create_edge(self, liker_id: Any, liked_id: Any) -> Any:
        """
        Persist and commit a new edge.

        Raises AlreadyLiked if the ordered pair already has an edge.
        The edge must be durable before this returns so that a concurrent
        like in the reverse direction observes it.
        """
        pass

    @abstractmethod
    def edges_from(self, liker_id: Any) -> List[Any]:
        """Edges created by liker_id, oldest first."""
        pass

    @abstractmethod
    def edges_to(self, liked_id: Any) -> List[Any]:
        """Edges pointing at liked_id, oldest first."""
        pass
