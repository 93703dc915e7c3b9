from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from staffhub.api.deps import get_access_context, require_permission
from staffhub.core.rbac import Permission
from staffhub.models.auth import AccessSummary, ActorPublic, Token
from staffhub.services.access_service import AccessContext
from staffhub.services.container import directory_service


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/token", response_model=Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()) -> Token:
    actor = directory_service.authenticate(form_data.username, form_data.password)
    if not actor:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return directory_service.issue_token(actor)


@router.get("/me", response_model=AccessSummary)
def read_me(context: AccessContext = Depends(get_access_context)) -> AccessSummary:
    return directory_service.summarize_access(context)


@router.get("/actors/{actor_id}/access", response_model=AccessSummary)
def read_actor_access(
    actor_id: str,
    context: AccessContext = Depends(require_permission(Permission.EDIT_EMPLOYEE)),
) -> AccessSummary:
    _ = context
    return directory_service.summarize_access(directory_service.access_context(actor_id))


@router.get("/actors", response_model=list[ActorPublic])
def list_actors(
    context: AccessContext = Depends(require_permission(Permission.EDIT_EMPLOYEE)),
) -> list[ActorPublic]:
    _ = context
    return directory_service.list_actors()
