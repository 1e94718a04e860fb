from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.like import LikeRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'LikeRepository',
]
