from sqlalchemy import (
    Column, Text, Boolean, Integer, Float, TIMESTAMP, ForeignKey, func,
    CheckConstraint, Index
)
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from .base import Base


class Profile(Base):
    """
    Dating profile: demographics, preferences and interests.

    Read-only to the matching engine. Age is validated at creation and
    never changed afterwards.
    """
    __tablename__ = 'profiles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    display_name = Column(Text, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(Text, nullable=False)
    gender_preference = Column(Text, nullable=False)
    bio = Column(Text)

    # Free-text label, compared by exact equality
    location = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)

    # Preferences
    age_range_min = Column(Integer, nullable=False, default=18)
    age_range_max = Column(Integer, nullable=False, default=100)
    max_distance = Column(Integer, nullable=False, default=50)

    # Subscription state
    is_premium = Column(Boolean, nullable=False, default=False)
    subscription_tier = Column(Text)
    subscription_status = Column(Text)
    subscription_expires_at = Column(TIMESTAMP(timezone=True))

    # Audit
    last_active_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    interest_rows = relationship(
        "ProfileInterest",
        back_populates="profile",
        order_by="ProfileInterest.position",
        collection_class=ordering_list('position'),
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    interests = association_proxy(
        'interest_rows', 'tag',
        creator=lambda tag: ProfileInterest(tag=tag)
    )

    __table_args__ = (
        CheckConstraint('age >= 18', name='ck_profiles_adult'),
        CheckConstraint('age_range_min <= age_range_max', name='ck_profiles_age_range'),
        Index('idx_profiles_gender_pref', 'gender', 'gender_preference'),
        Index('idx_profiles_age', 'age'),
        Index('idx_profiles_location', 'location'),
        Index('idx_profiles_lat_lon', 'latitude', 'longitude'),
    )

    def __repr__(self) -> str:
        return f"<Profile id={self.id} name={self.display_name!r}>"


class ProfileInterest(Base):
    """
    One interest tag of a profile.

    Tags are unique per profile; position keeps the display order.
    """
    __tablename__ = 'profile_interest'

    profile_id = Column(Integer, ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True)
    tag = Column(Text, primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    profile = relationship("Profile", back_populates="interest_rows")

    __table_args__ = (
        Index('idx_profile_interest_tag', 'tag'),
    )
