from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from staffhub.core.exceptions import NotFound
from staffhub.core.rbac import Permission
from staffhub.core.security import decode_access_token
from staffhub.services.access_service import AccessContext
from staffhub.services.container import directory_service


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_access_context(token: str = Depends(oauth2_scheme)) -> AccessContext:
    try:
        payload = decode_access_token(token)
        actor_id = payload.get("sub")
    except ValueError as exc:
        raise _unauthorized() from exc

    if not actor_id:
        raise _unauthorized()

    try:
        context = directory_service.access_context(actor_id)
    except NotFound as exc:
        raise _unauthorized() from exc

    if not context.actor.get("active", True):
        raise _unauthorized()
    return context


def require_permission(permission: Permission) -> Callable[[AccessContext], AccessContext]:
    def dependency(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        if not context.can(permission):
            raise HTTPException(status_code=403, detail=f"Missing permission '{permission.value}'")
        return context

    return dependency
