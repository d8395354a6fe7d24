"""Mountains API router."""

from fastapi import APIRouter, Depends, Query, Response, status

from paharnama.dependencies.roles import get_admin_user
from paharnama.dependencies.auth import get_current_user
from paharnama.dependencies.services import get_mountain_service
from paharnama.models.user import User
from paharnama.schemas.mountain import Mountain as MountainSchema
from paharnama.schemas.mountain import MountainCreate, MountainUpdate
from paharnama.services.mountain_service import DEFAULT_LANGUAGE, MountainService

router = APIRouter(prefix="/mountains", tags=["mountains"])

LanguageQuery = Query(DEFAULT_LANGUAGE, min_length=2, max_length=10, description="Translation language")


@router.post("", response_model=MountainSchema, status_code=status.HTTP_201_CREATED)
def create_mountain(
    mountain: MountainCreate,
    service: MountainService = Depends(get_mountain_service),
    admin: User = Depends(get_admin_user),
):
    """Create a mountain with its translations."""
    return service.create(mountain)


@router.get("", response_model=list[MountainSchema])
def list_mountains(
    lang: str = LanguageQuery,
    service: MountainService = Depends(get_mountain_service),
    current_user: User = Depends(get_current_user),
):
    """List all mountains with translations in the requested language."""
    return service.list_all(lang)


@router.get("/{mountain_id}", response_model=MountainSchema)
def get_mountain(
    mountain_id: int,
    lang: str = LanguageQuery,
    service: MountainService = Depends(get_mountain_service),
    current_user: User = Depends(get_current_user),
):
    """Get a mountain by ID."""
    return service.get(mountain_id, lang)


@router.patch("/{mountain_id}", response_model=MountainSchema)
def update_mountain(
    mountain_id: int,
    mountain_update: MountainUpdate,
    lang: str = LanguageQuery,
    service: MountainService = Depends(get_mountain_service),
    admin: User = Depends(get_admin_user),
):
    """Update a mountain and upsert its translations."""
    return service.update(mountain_id, mountain_update, lang)


@router.delete("/{mountain_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mountain(
    mountain_id: int,
    service: MountainService = Depends(get_mountain_service),
    admin: User = Depends(get_admin_user),
):
    """Delete a mountain and its translations."""
    service.delete(mountain_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
