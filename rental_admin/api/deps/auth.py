# rental_admin/api/deps/auth.py - Bearer token authentication and role checks
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Dict, Any, List

from rental_admin.core.config import settings
from rental_admin.core.security import decode_token

security = HTTPBearer(auto_error=False)

SUPERUSER_ROLE = "admin"


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """
    Decode JWT and return caller context.
    Returns: {"user_id": int, "roles": list[str], "claims": dict}
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(credentials.credentials)

    user_id_str = claims.get("sub")
    if not user_id_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user ID"
        )

    try:
        user_id = int(user_id_str)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID format"
        )

    roles = claims.get("roles") or []
    if not isinstance(roles, list):
        roles = [str(roles)]

    return {
        "user_id": user_id,
        "roles": [str(role) for role in roles],
        "claims": claims,
    }


def require_roles(required_roles: List[str]):
    """
    Create a dependency that requires any of the given roles. ``admin`` always passes.
    Usage: @router.get("/x", dependencies=[Depends(require_roles(["admin", "director_general"]))])
    """
    def role_checker(ctx: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        user_roles = ctx["roles"]
        if SUPERUSER_ROLE in user_roles:
            return ctx
        if not any(role in user_roles for role in required_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {required_roles}"
            )
        return ctx
    return role_checker


require_config_admin = require_roles(settings.CONFIG_ADMIN_ROLES)
