#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field


class LikeRequest(BaseModel):
    """Request to like another profile."""
    liked_id: int = Field(..., ge=1, description="Profile ID being liked")
