from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, func, UniqueConstraint, CheckConstraint, Index

from .base import Base


class Like(Base):
    """
    Directed like edge (liker -> liked).

    At most one edge per ordered pair. Edges are never updated. A pair with
    edges in both directions is a match; matches are not stored.
    """
    __tablename__ = 'likes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    liker_id = Column(Integer, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    liked_id = Column(Integer, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('liker_id', 'liked_id', name='uq_likes_liker_liked'),
        CheckConstraint('liker_id <> liked_id', name='ck_likes_not_self'),
        Index('idx_likes_liked', 'liked_id'),
    )

    def __repr__(self) -> str:
        return f"<Like {self.liker_id} -> {self.liked_id}>"
