"""
App factory for the Taskgate service.

Creates a pre-configured FastAPI application with:
- CORS middleware
- Health check endpoint
- Auth endpoints and one endpoint per route-table entry under the API prefix
- Lifespan hook disposing the connection pool
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from ..api.auth_endpoints import router as auth_router
from ..api.deps import GatewayState
from ..api.router import create_call_router
from ..config import Settings, get_settings
from ..core.registry import CallRegistry, build_registry
from ..iam.passwords import PasswordHasher
from ..iam.service import IdentityService
from ..iam.two_factor import TwoFactor
from ..logs import configure_logging
from ..runtime.dispatcher import CallDispatcher
from ..runtime.executor import CallExecutor
from .database import close_engine, create_engine


logger = logging.getLogger(__name__)


def build_state(
    settings: Settings,
    engine: AsyncEngine,
    registry: Optional[CallRegistry] = None,
) -> GatewayState:
    """Wire the collaborators shared by every request."""
    registry = registry or build_registry()

    executor = CallExecutor(
        engine,
        timeout=settings.CALL_TIMEOUT_SECONDS,
        principal_setting=settings.PRINCIPAL_SETTING,
    )
    dispatcher = CallDispatcher(
        executor,
        registry,
        production=settings.is_production,
        default_items_per_page=settings.DEFAULT_ITEMS_PER_PAGE,
        max_items_per_page=settings.MAX_ITEMS_PER_PAGE,
    )

    return GatewayState(
        settings=settings,
        registry=registry,
        dispatcher=dispatcher,
        identity=IdentityService(
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expires_minutes=settings.JWT_EXPIRES_MINUTES,
        ),
        passwords=PasswordHasher(
            pepper=settings.PASSWORD_PEPPER,
            rounds=settings.PASSWORD_SALT_ROUNDS,
        ),
        two_factor=TwoFactor(issuer=settings.TOTP_ISSUER, window=settings.TOTP_WINDOW),
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[AsyncEngine] = None,
    registry: Optional[CallRegistry] = None,
) -> FastAPI:
    """
    Create the Taskgate FastAPI app.

    Args:
        settings: Service settings (default: loaded from the environment)
        engine: Async engine to use; when omitted one is created from
            settings and disposed on shutdown
        registry: Call registry (default: full call catalogue and route table)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    owns_engine = engine is None
    engine = engine or create_engine(settings)
    state = build_state(settings, engine, registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_logging(settings.LOG_LEVEL)
        logger.info(
            f"{settings.SERVICE_NAME} started ({settings.ENV}): "
            f"{len(state.registry)} calls, {len(state.registry.routes)} routes"
        )

        yield

        # Shutdown
        if owns_engine:
            await close_engine(engine)

    app = FastAPI(
        title=f"{settings.SERVICE_NAME.replace('_', ' ').title()} Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.taskgate = state

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api = APIRouter(prefix=settings.API_PREFIX)

    # Health check endpoint
    @api.get("/health")
    async def health_check():
        return {"status": "ok", "service": settings.SERVICE_NAME}

    api.include_router(auth_router)
    api.include_router(create_call_router(state.registry))
    app.include_router(api)

    return app
