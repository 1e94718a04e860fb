#!/usr/bin/env python3
"""
Discovery endpoints - ranked and auxiliary candidate lists.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_current_user_id, get_discovery_service
from ..services.discovery_service import DiscoveryService
from ..models.responses import (
    CompatibilityResponse,
    DiscoverResponse,
    ProfilesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["discover"])


@router.get("/discover", response_model=DiscoverResponse)
def discover(
    limit: Optional[int] = Query(default=None, ge=1, le=500, description="Maximum candidates to return"),
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """
    Get candidates ranked by compatibility score (highest first).

    Already-liked profiles are never returned. When the primary eligibility
    query fails, a looser filter is used and the response is flagged
    with degraded=true.
    """
    return service.discover(user_id, limit)


@router.get("/discover/interests", response_model=ProfilesResponse)
def discover_by_interest(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """Profiles sharing at least one interest with the requester."""
    return service.discover_by_interest(user_id, limit)


@router.get("/discover/location", response_model=ProfilesResponse)
def discover_by_location(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """Profiles near the requester (radius search, else same location label)."""
    return service.discover_by_location(user_id, limit)


@router.get("/compatibility/{other_id}", response_model=CompatibilityResponse)
def get_compatibility(
    other_id: int,
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """Explain the compatibility score between the requester and one profile."""
    return service.compatibility(user_id, other_id)
