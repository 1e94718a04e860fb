from .base import Base
from .profile import Profile, ProfileInterest
from .like import Like

__all__ = [
    'Base',
    'Profile',
    'ProfileInterest',
    'Like',
]
