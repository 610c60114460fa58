from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.db import filters as _filters  # noqa: F401  (register the row-scoping hook)
from app.db.init_db import init_db
from app.jwt_util import JwtConfig, TokenValidator
from app.logging_config import configure_app_logging
from app.routers import (
    calendar_images,
    calendar_styles,
    calendars,
    events,
    health,
    holiday_groups,
    holidays,
    images,
    token,
    users,
)
from app.security.config import load_security_config
from app.security.dependencies import enforce_security
from app.security.errors import AccessDeniedError, AccessPolicyUnavailableError, PrincipalRequiredError
from app.security.scoping import RowScopingFilter
from app.security.voters import default_decision_manager
from app.settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings = get_settings()
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        config = load_security_config(settings.resolved_security_config_path(), settings.jwt_role)
        logger.info(
            "Loaded security config: %s (jwt_role=%s)",
            settings.resolved_security_config_path(),
            config.access_policy.jwt_role.value,
        )

        app.state.security_config = config
        app.state.row_filter = RowScopingFilter(config.access_policy)
        app.state.decision_manager = default_decision_manager(config.access_policy)
        app.state.token_validator = TokenValidator(JwtConfig.from_environ())

        if settings.init_db_on_startup:
            init_db(seed=settings.seed_demo_data)
            logger.info("Database initialized (tables ensured + seed if needed)")

        yield

    # Global dependency: every route passes through enforce_security.
    app = FastAPI(title="Calendar API", dependencies=[Depends(enforce_security)], lifespan=lifespan)

    app.include_router(health.router)
    app.include_router(token.router)
    app.include_router(users.router)
    app.include_router(calendars.router)
    app.include_router(images.router)
    app.include_router(calendar_images.router)
    app.include_router(events.router)
    app.include_router(calendar_styles.router)
    app.include_router(holiday_groups.router)
    app.include_router(holidays.router)

    _register_error_handlers(app)

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccessPolicyUnavailableError)
    async def _policy_unavailable(request: Request, exc: AccessPolicyUnavailableError) -> JSONResponse:
        logger.error("Access policy unavailable path=%s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Access policy unavailable"},
        )

    @app.exception_handler(PrincipalRequiredError)
    async def _principal_required(request: Request, exc: PrincipalRequiredError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AccessDeniedError)
    async def _access_denied(request: Request, exc: AccessDeniedError) -> JSONResponse:
        logger.info("Access denied path=%s attribute=%s", request.url.path, exc.attribute)
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.message})


app = create_app()
