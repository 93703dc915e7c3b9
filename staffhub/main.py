from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from staffhub.api.routers.audit import router as audit_router
from staffhub.api.routers.auth import router as auth_router
from staffhub.api.routers.calendar import router as calendar_router
from staffhub.api.routers.leave import router as leave_router
from staffhub.core.config import settings
from staffhub.core.exceptions import (
    AuthorizationDenied,
    DomainError,
    InputError,
    LeaveRuleViolation,
    NotFound,
)
from staffhub.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description=(
        "Role resolution, permission guards, default-deny visibility scopes and "
        "holiday-aware leave accounting for the StaffHub staff-management application."
    ),
)

_STATUS_CODES: tuple[tuple[type[DomainError], int], ...] = (
    (AuthorizationDenied, 403),
    (NotFound, 404),
    (InputError, 400),
    (LeaveRuleViolation, 400),
)


@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    status_code = next((code for kind, code in _STATUS_CODES if isinstance(exc, kind)), 400)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.get("/")
def health() -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}


app.include_router(auth_router)
app.include_router(leave_router)
app.include_router(audit_router)
app.include_router(calendar_router)
