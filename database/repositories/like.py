import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from core.matching.errors import AlreadyLiked
from core.matching.interfaces import AffinityLedger
from database.models import Like
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class LikeRepository(BaseRepository, AffinityLedger):
    """SQL-backed affinity ledger. The unique constraint on (liker_id, liked_id) is authoritative."""

    def get_edge(self, liker_id: Any, liked_id: Any) -> Optional[Like]:
        stmt = select(Like).where(
            Like.liker_id == liker_id,
            Like.liked_id == liked_id
        )
        with self.store_call("get_edge"):
            return self.db.execute(stmt).scalar_one_or_none()

    def has_edge(self, liker_id: Any, liked_id: Any) -> bool:
        return self.get_edge(liker_id, liked_id) is not None

    def create_edge(self, liker_id: Any, liked_id: Any) -> Like:
        """
        Insert and commit the edge.

        Committing here makes the edge visible to a concurrent reverse like
        before this caller reads the reverse edge.
        """
        like = Like(liker_id=liker_id, liked_id=liked_id)
        with self.store_call("create_edge"):
            self.db.add(like)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if self.has_edge(liker_id, liked_id):
                    raise AlreadyLiked(liker_id, liked_id) from e
                raise
            self.db.refresh(like)
        return like

    def edges_from(self, liker_id: Any) -> List[Like]:
        stmt = select(Like).where(Like.liker_id == liker_id).order_by(Like.created_at, Like.id)
        with self.store_call("edges_from"):
            return list(self.db.execute(stmt).scalars().all())

    def edges_to(self, liked_id: Any) -> List[Like]:
        stmt = select(Like).where(Like.liked_id == liked_id).order_by(Like.created_at, Like.id)
        with self.store_call("edges_to"):
            return list(self.db.execute(stmt).scalars().all())
