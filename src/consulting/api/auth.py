"""Caller identity for API requests.

Authentication happens upstream: the gateway forwards the verified user id
and role as ``X-User-Id`` and ``X-User-Role`` headers. Missing or malformed
headers are a 401; an authenticated caller with the wrong role is a 403.
"""

from fastapi import Depends, Header, HTTPException

from consulting.errors import AccessDenied
from consulting.shared.access import Caller, Role


async def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        role = Role((x_user_role or "").strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user role") from None
    return Caller(id=x_user_id.strip(), role=role)


def require_roles(*roles: Role):
    """Dependency factory admitting only callers with one of ``roles``."""

    async def _caller_with_role(caller: Caller = Depends(current_caller)) -> Caller:
        if caller.role not in roles:
            raise AccessDenied({"role": [f"Requires role: {', '.join(role.value for role in roles)}"]})
        return caller

    return _caller_with_role
