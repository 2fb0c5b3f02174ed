"""
Service layer for tastematch.

    from tastematch.services import get_matching_service

    service = get_matching_service()
    matches = service.top_matches(42, n=10)
"""

from .matching import MatchingService, get_matching_service, reset_matching_service

__all__ = ["MatchingService", "get_matching_service", "reset_matching_service"]
