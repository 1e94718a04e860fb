#!/usr/bin/env python3
"""
Match endpoints - profiles with a mutual like.
"""

import logging
from fastapi import APIRouter, Depends

from ..dependencies import get_current_user_id, get_discovery_service
from ..services.discovery_service import DiscoveryService
from ..models.responses import MatchesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("", response_model=MatchesResponse)
def get_matches(
    user_id: int = Depends(get_current_user_id),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """
    Get every profile the requester shares a mutual like with,
    in the order the requester liked them.
    """
    return service.matches(user_id)
