import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_, select

from core.matching.errors import InvalidInput
from core.matching.geo import bounding_box, coordinates_of, haversine_km
from core.matching.interfaces import ProfileDirectory
from database.models import Profile, ProfileInterest
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

MIN_AGE = 18

PROFILE_FIELDS = {
    'display_name', 'age', 'gender', 'gender_preference', 'bio',
    'location', 'latitude', 'longitude', 'interests',
    'age_range_min', 'age_range_max', 'max_distance',
    'is_premium', 'subscription_tier', 'subscription_status',
}


def _normalize_interests(interests: Optional[Sequence[Any]]) -> List[str]:
    """Drop blanks and duplicates, keep first-seen order."""
    seen = set()
    result = []
    for interest in interests or []:
        if not isinstance(interest, str):
            raise InvalidInput(f"interest tags must be strings, got {interest!r}")
        tag = interest.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def validate_profile_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize profile fields before creation.

    Raises:
        InvalidInput: missing identity fields, non-adult age, inverted age
            range, non-positive max distance or unusable coordinates
    """
    unknown = set(data) - PROFILE_FIELDS
    if unknown:
        raise InvalidInput(f"unknown profile fields: {', '.join(sorted(unknown))}")

    cleaned = dict(data)

    for required in ('display_name', 'gender', 'gender_preference'):
        value = cleaned.get(required)
        if not isinstance(value, str) or not value.strip():
            raise InvalidInput(f"{required} is required")

    age = cleaned.get('age')
    if isinstance(age, bool) or not isinstance(age, int):
        raise InvalidInput(f"age must be an integer, got {age!r}")
    if age < MIN_AGE:
        raise InvalidInput(f"age must be at least {MIN_AGE}, got {age}")

    range_min = cleaned.setdefault('age_range_min', MIN_AGE)
    range_max = cleaned.setdefault('age_range_max', 100)
    for name, value in (('age_range_min', range_min), ('age_range_max', range_max)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if range_min > range_max:
        raise InvalidInput(f"age_range_min ({range_min}) must not exceed age_range_max ({range_max})")

    max_distance = cleaned.setdefault('max_distance', 50)
    if isinstance(max_distance, bool) or not isinstance(max_distance, int) or max_distance <= 0:
        raise InvalidInput(f"max_distance must be a positive integer, got {max_distance!r}")

    lat, lon = cleaned.get('latitude'), cleaned.get('longitude')
    if (lat is None) != (lon is None):
        raise InvalidInput("latitude and longitude must be provided together")
    if lat is not None:
        try:
            lat, lon = float(lat), float(lon)
        except (TypeError, ValueError):
            raise InvalidInput("latitude and longitude must be numbers")
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidInput("latitude and longitude must be finite")
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise InvalidInput(f"coordinates out of range: ({lat}, {lon})")
        cleaned['latitude'], cleaned['longitude'] = lat, lon

    cleaned['interests'] = _normalize_interests(cleaned.get('interests'))
    return cleaned


class ProfileRepository(BaseRepository, ProfileDirectory):
    """SQL-backed profile directory."""

    def get_by_id(self, profile_id: Any) -> Optional[Profile]:
        with self.store_call("get_by_id"):
            return self.db.get(Profile, profile_id)

    def get_many(self, profile_ids: Sequence[Any]) -> List[Profile]:
        if not profile_ids:
            return []
        with self.store_call("get_many"):
            stmt = select(Profile).where(Profile.id.in_(list(profile_ids)))
            found = {p.id: p for p in self.db.execute(stmt).scalars().all()}
        return [found[pid] for pid in profile_ids if pid in found]

    def query_eligible(self, requester: Profile, limit: int) -> List[Profile]:
        stmt = select(Profile).where(
            Profile.id != requester.id,
            # Mutual gender preference
            Profile.gender == requester.gender_preference,
            Profile.gender_preference == requester.gender,
            # Candidate inside requester's range
            Profile.age >= requester.age_range_min,
            Profile.age <= requester.age_range_max,
            # Requester inside candidate's range
            Profile.age_range_min <= requester.age,
            Profile.age_range_max >= requester.age,
        ).order_by(Profile.id).limit(limit)

        with self.store_call("query_eligible"):
            return list(self.db.execute(stmt).scalars().all())

    def query_loose(self, requester: Profile, limit: int) -> List[Profile]:
        stmt = select(Profile).where(
            Profile.id != requester.id,
            Profile.gender == requester.gender_preference,
            Profile.age >= requester.age_range_min,
            Profile.age <= requester.age_range_max,
        ).order_by(Profile.id).limit(limit)

        with self.store_call("query_loose"):
            return list(self.db.execute(stmt).scalars().all())

    def query_by_interest_overlap(
        self,
        interests: Sequence[str],
        exclude_id: Any,
        limit: int
    ) -> List[Profile]:
        if not interests:
            return []

        sharing = select(ProfileInterest.profile_id).where(
            ProfileInterest.tag.in_(list(interests))
        )
        stmt = select(Profile).where(
            Profile.id != exclude_id,
            Profile.id.in_(sharing)
        ).order_by(Profile.id).limit(limit)

        with self.store_call("query_by_interest_overlap"):
            return list(self.db.execute(stmt).scalars().all())

    def query_by_location_label(
        self,
        label: str,
        exclude_id: Any,
        limit: int,
        without_coordinates: bool = False
    ) -> List[Profile]:
        if not label:
            return []

        stmt = select(Profile).where(
            Profile.id != exclude_id,
            Profile.location == label
        )
        if without_coordinates:
            stmt = stmt.where(or_(Profile.latitude.is_(None), Profile.longitude.is_(None)))
        stmt = stmt.order_by(Profile.id).limit(limit)

        with self.store_call("query_by_location_label"):
            return list(self.db.execute(stmt).scalars().all())

    def query_within_radius(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        exclude_id: Any,
        limit: int
    ) -> List[Profile]:
        """
        Radius search: bounding-box prefilter in SQL, Haversine confirm here.

        Returns profiles within radius_km ordered by distance, then id.
        """
        box = bounding_box(latitude, longitude, radius_km)
        stmt = select(Profile).where(
            Profile.id != exclude_id,
            Profile.latitude.is_not(None),
            Profile.longitude.is_not(None),
            Profile.latitude.between(box.min_lat, box.max_lat),
        )
        if box.min_lon is not None:
            stmt = stmt.where(Profile.longitude.between(box.min_lon, box.max_lon))
        stmt = stmt.order_by(Profile.id)

        with self.store_call("query_within_radius"):
            rows = self.db.execute(stmt).scalars().all()

        within = []
        for profile in rows:
            coords = coordinates_of(profile)
            if coords is None:
                continue
            distance = haversine_km(latitude, longitude, coords[0], coords[1])
            if distance <= radius_km:
                within.append((distance, profile.id, profile))

        within.sort(key=lambda item: (item[0], item[1]))
        logger.debug(
            f"Radius search ({radius_km} km): {len(rows)} in box, {len(within)} within radius"
        )
        return [profile for _, _, profile in within[:limit]]

    # --- Profile writes (registration / edits, never called by the engine) ---

    def create_profile(self, data: Dict[str, Any]) -> Profile:
        cleaned = validate_profile_data(data)
        interests = cleaned.pop('interests')

        profile = Profile(**cleaned)
        profile.interests.extend(interests)

        with self.store_call("create_profile"):
            self.db.add(profile)
            self.db.flush()  # Generate ID
        return profile

    def update_interests(self, profile: Profile, interests: Sequence[str]) -> Profile:
        cleaned = _normalize_interests(interests)
        with self.store_call("update_interests"):
            profile.interests = cleaned
            self.db.flush()
        return profile

    def touch_last_active(self, profile_id: Any) -> None:
        profile = self.get_by_id(profile_id)
        if profile is None:
            return
        with self.store_call("touch_last_active"):
            profile.last_active_at = datetime.now(timezone.utc)
            self.db.flush()
