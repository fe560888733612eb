"""
FastAPI application entry point.

``create_app`` builds every process-wide object once (settings, logging,
database manager, profile write locks, GitHub client) and stores it on
``app.state``; routes receive them through dependencies.

Run with:
    python -m backend.app.main
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core.api import GitHubClient
from core.db import DatabaseManager
from core.locks import KeyedLocks
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .config import Settings, get_settings
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import profile as profile_router


def check_configuration(settings: Settings, logger) -> None:
    """Log configuration problems; fatal ones abort startup in production."""
    errors, warnings = settings.validate_production_config()
    for warning in warnings:
        logger.warning("config_warning", message=warning)

    if not errors:
        return
    for error in errors:
        logger.error("config_error", error=error)
    if settings.is_production:
        raise RuntimeError("Invalid production configuration")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    configure_logging(level="DEBUG" if settings.debug else settings.log_level, json_logs=settings.json_logs)
    logger = get_logger("api")

    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.state.settings = settings
    app.state.logger = logger
    app.state.db = DatabaseManager(settings)
    app.state.profile_locks = KeyedLocks()
    app.state.github = GitHubClient(settings, logger=get_logger("github"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "x-auth-token", "X-Request-ID"],
    )

    # Added last so it runs first and binds the id before request logging
    app.add_middleware(RequestLoggingMiddleware, logger=get_logger("http"))
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        logger.info("app_startup", app_name=settings.app_name, port=settings.port)
        check_configuration(settings, logger)

        app.state.db.initialize()
        app.state.db.create_all_tables()
        logger.info("database_initialized")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("app_shutdown")
        app.state.db.dispose()
        app.state.github.http.close()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe backed by a database round trip."""
        db_health = app.state.db.health_check()
        if not db_health["healthy"]:
            logger.error("health_check_failed", error=db_health["error"])
            return JSONResponse(
                status_code=503, content={"status": "unavailable", "error": db_health["error"]}
            )
        return {"status": "ok"}

    @app.get(settings.api_prefix, tags=["health"], response_class=PlainTextResponse)
    def api_root():
        return "API running"

    app.include_router(profile_router.router, prefix=settings.api_prefix)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
