"""FastAPI application factory."""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from todoay.admin.router import router as admin_router
from todoay.auth.router import router as auth_router
from todoay.category.router import router as category_router
from todoay.config import engine, settings
from todoay.logging_config import setup_logging
from todoay.middleware.correlation import CorrelationMiddleware
from todoay.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from todoay.middleware.logging import LoggingMiddleware
from todoay.middleware.security import SecurityMiddleware
from todoay.models import create_tables
from todoay.profile.router import router as profile_router
from todoay.security.gate import security_gate
from todoay.security.rules import DEFAULT_RULES, AccessRule


def create_app(access_rules: tuple[AccessRule, ...] = DEFAULT_RULES) -> FastAPI:
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_tables(engine)
        yield

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=lifespan,
        # Account and role checks for every routed request.
        dependencies=[Depends(security_gate)],
    )
    app.state.access_rules = access_rules

    # add_middleware wraps, so the last one added runs first:
    # Correlation -> Logging -> ErrorHandler -> Security -> route
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(profile_router, prefix="/profile", tags=["profile"])
    app.include_router(category_router, prefix="/category", tags=["category"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
