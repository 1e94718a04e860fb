#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ProfileSummary(BaseModel):
    """Public view of a profile."""
    id: int
    display_name: str
    age: int
    gender: str
    gender_preference: str
    bio: Optional[str] = None
    location: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    is_premium: bool = False
    last_active_at: Optional[str] = None


class ScoreBreakdown(BaseModel):
    """Per-factor compatibility subscores."""
    interests: int = Field(ge=0, le=100)
    age: int = Field(ge=0, le=100)
    location: int = Field(ge=0, le=100)
    activity: int = Field(ge=0, le=100)
    total: int = Field(ge=0, le=100)
    shared_interests: List[str] = Field(default_factory=list)
    distance_km: Optional[float] = None


class CandidateSummary(ProfileSummary):
    """A ranked candidate with its compatibility score."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 42,
                "display_name": "Sam",
                "age": 26,
                "gender": "female",
                "gender_preference": "male",
                "bio": "Climber and coffee snob",
                "location": "Berlin",
                "interests": ["climbing", "coffee"],
                "is_premium": False,
                "last_active_at": "2026-02-01T12:00:00",
                "compatibility_score": 74,
                "score_breakdown": {
                    "interests": 16,
                    "age": 18,
                    "location": 20,
                    "activity": 20,
                    "total": 74,
                    "shared_interests": ["climbing", "coffee"],
                    "distance_km": None
                }
            }
        }
    )

    compatibility_score: int = Field(ge=0, le=100)
    score_breakdown: Optional[ScoreBreakdown] = None


class DiscoverResponse(BaseModel):
    """Ranked candidate list."""
    success: bool
    count: int
    degraded: bool = False
    degraded_reason: Optional[str] = None
    candidates: List[CandidateSummary]


class ProfilesResponse(BaseModel):
    """Unscored profile list (interest-only and location-only discovery)."""
    success: bool
    count: int
    profiles: List[ProfileSummary]


class LikeSummary(BaseModel):
    id: int
    liker_id: int
    liked_id: int
    created_at: Optional[str] = None


class LikeResponse(BaseModel):
    """Result of recording a like."""
    success: bool
    like: LikeSummary
    edge_created: bool
    is_match: bool
    matched_profile: Optional[ProfileSummary] = None


class MatchesResponse(BaseModel):
    """Profiles with a mutual like."""
    success: bool
    count: int
    matches: List[ProfileSummary]


class CompatibilityResponse(BaseModel):
    """Score breakdown between the requester and one other profile."""
    success: bool
    requester_id: int
    candidate_id: int
    breakdown: ScoreBreakdown
