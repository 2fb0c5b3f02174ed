"""
Dependency injection for API endpoints.

Routes receive the MatchingService through FastAPI's dependency system so
tests can swap in a service bound to a temporary database with
``app.dependency_overrides[get_service]``.

Routes are sync: FastAPI runs them in its thread pool, and both stores are
safe to share across threads (SQLite serializes on a lock, PostgreSQL
checks connections out of a pool).
"""

from typing import Annotated

from fastapi import Depends

from ..services.matching import MatchingService, get_matching_service


def get_service() -> MatchingService:
    """
    Dependency that provides the matching service.

    Returns:
        MatchingService bound to the configured database
    """
    return get_matching_service()


# Type alias for dependency injection
ServiceDependency = Annotated[MatchingService, Depends(get_service)]
