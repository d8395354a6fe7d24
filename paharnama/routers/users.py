"""User administration router (admin only)."""

from fastapi import APIRouter, Depends, Query, status

from paharnama.dependencies.roles import get_admin_user
from paharnama.dependencies.services import get_user_service
from paharnama.models.user import Role, User
from paharnama.schemas.common import ApiResponse
from paharnama.schemas.user import UserCreate, UserDetail, UserQuery, UserUpdate
from paharnama.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _user_payload(user: User) -> dict:
    return {"user": UserDetail.model_validate(user).model_dump(mode="json")}


@router.get("", response_model=ApiResponse)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None, max_length=100),
    role: Role | None = None,
    is_active: bool | None = None,
    is_verified: bool | None = None,
    service: UserService = Depends(get_user_service),
    admin: User = Depends(get_admin_user),
) -> dict:
    """List users with pagination, search and filters."""
    result = service.list_users(
        UserQuery(
            page=page,
            limit=limit,
            search=search,
            role=role,
            is_active=is_active,
            is_verified=is_verified,
        )
    )
    return {
        "success": True,
        "message": "Users retrieved successfully",
        "data": result.model_dump(mode="json"),
    }


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
    admin: User = Depends(get_admin_user),
) -> dict:
    """Create a user account."""
    user = service.create_user(data)
    return {"success": True, "message": "User created successfully", "data": _user_payload(user)}


@router.get("/{user_id}", response_model=ApiResponse)
def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    admin: User = Depends(get_admin_user),
) -> dict:
    """Get a user by ID."""
    user = service.get_user(user_id)
    return {"success": True, "message": "User retrieved successfully", "data": _user_payload(user)}


@router.patch("/{user_id}", response_model=ApiResponse)
def update_user(
    user_id: str,
    data: UserUpdate,
    service: UserService = Depends(get_user_service),
    admin: User = Depends(get_admin_user),
) -> dict:
    """Update a user's profile, role or status."""
    user = service.update_user(user_id, data)
    return {"success": True, "message": "User updated successfully", "data": _user_payload(user)}


@router.delete("/{user_id}", response_model=ApiResponse)
def deactivate_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    admin: User = Depends(get_admin_user),
) -> dict:
    """Deactivate a user. The account is kept but can no longer log in."""
    user = service.deactivate_user(user_id)
    return {"success": True, "message": "User deactivated successfully", "data": _user_payload(user)}
