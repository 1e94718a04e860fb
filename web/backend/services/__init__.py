"""Business logic services."""

from .discovery_service import DiscoveryService
