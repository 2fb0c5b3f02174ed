"""
Entities router - registers entities and maintains their taste profiles.

Endpoints:
- POST / - Create an entity with its preference vector
- PUT /{entity_id}/profile - Replace an entity's preference vector
"""

from fastapi import APIRouter, status
from pydantic import BaseModel

from ...core.models import EntityModel, PreferenceVectorModel
from ..dependencies import ServiceDependency

router = APIRouter()


class EntityCreateRequest(BaseModel):
    """New entity with its taste profile."""

    email: str
    profile: PreferenceVectorModel


class ProfileResponse(BaseModel):
    """An entity's stored taste profile."""

    entity_id: int
    profile: PreferenceVectorModel


@router.post("", response_model=EntityModel, status_code=status.HTTP_201_CREATED)
def create_entity(request: EntityCreateRequest, service: ServiceDependency) -> EntityModel:
    """Create an entity; the email must be unused."""
    entity_id = service.register(request.email, request.profile.to_vector())
    return EntityModel(id=entity_id, email=request.email)


@router.put("/{entity_id}/profile", response_model=ProfileResponse)
def update_profile(
    entity_id: int,
    profile: PreferenceVectorModel,
    service: ServiceDependency,
) -> ProfileResponse:
    stored = service.update_profile(entity_id, profile.to_vector())
    return ProfileResponse(
        entity_id=entity_id,
        profile=PreferenceVectorModel(**stored.as_dict()),
    )
