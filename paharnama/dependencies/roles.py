"""Role-based authorization dependencies."""

from collections.abc import Callable

from fastapi import Depends, HTTPException, status

from paharnama.dependencies.auth import get_current_user
from paharnama.models.user import Role, User


def require_role(*roles: Role) -> Callable[..., User]:
    """Build a dependency that admits only users holding one of ``roles``.

    The role is read from the database row loaded by get_current_user, not
    from the token, so a demotion takes effect on the next request.

    Usage:
        @router.delete("/{item_id}")
        def delete_item(user: User = Depends(require_role(Role.ADMIN))):
            ...
    """
    required = " or ".join(role.value.capitalize() for role in roles)

    def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{required} access required",
            )
        return current_user

    return check_role


get_admin_user = require_role(Role.ADMIN)
