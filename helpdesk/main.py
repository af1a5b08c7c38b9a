import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from helpdesk.api.errors import register_exception_handlers
from helpdesk.api.v1.routes import auth, estadisticas, tickets
from helpdesk.core.config import Settings
from helpdesk.core.logging import setup_logging
from helpdesk.core.startup import startup_initialization
from helpdesk.db.session import Database

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one Settings and one Database"""
    settings = settings or Settings()
    setup_logging(settings)

    app = FastAPI(
        title="Helpdesk Ticket Service API",
        description="IT helpdesk tickets: submission, triage, assignment and resolution",
        version=VERSION
    )
    app.state.settings = settings
    app.state.database = Database(settings)

    # Include API routes
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(tickets.router, prefix="/api/v1")
    app.include_router(estadisticas.router, prefix="/api/v1")

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def startup_db_client():
        """Create tables and the admin account on startup"""
        startup_initialization(app.state.database, app.state.settings)

    @app.on_event("shutdown")
    def shutdown_db_client():
        """Release pooled connections on shutdown"""
        app.state.database.dispose()
        logger.info("🔒 Database connections closed")

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "Helpdesk Ticket Service API",
            "version": VERSION,
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "login": "/api/v1/auth/login",
                "tickets": "/api/v1/tickets",
                "statistics": "/api/v1/estadisticas"
            }
        }

    @app.get("/health")
    def health_check(request: Request):
        database_ok = request.app.state.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "service": settings.APP_NAME,
            "database": "connected" if database_ok else "unavailable"
        }

    return app


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
