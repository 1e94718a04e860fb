#!/usr/bin/env python3
"""
Like endpoints - record a like and report new matches.
"""

import logging
from fastapi import APIRouter, Depends

from ..dependencies import get_current_user_id, get_discovery_service
from ..services.discovery_service import DiscoveryService
from ..models.requests import LikeRequest
from ..models.responses import LikeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/likes", tags=["likes"])


@router.post("", response_model=LikeResponse, status_code=201)
def create_like(
    request: LikeRequest,
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """
    Like another profile.

    Returns is_match=true and the matched profile when the other profile
    already liked the requester. Liking the same profile twice returns 409.
    """
    return service.like(user_id, request.liked_id)
