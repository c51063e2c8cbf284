import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from a11ycheck.features.auth.routes.auth import router as auth_router
from a11ycheck.features.health.routes.health import router as health_router
from a11ycheck.features.reports.routes.email import router as email_router
from a11ycheck.features.scan.dependencies.scanner import build_scanner
from a11ycheck.features.scan.routes.scan import router as scan_router
from a11ycheck.platform.config import settings
from a11ycheck.platform.db.session import create_tables, engine
from a11ycheck.platform.exceptions import add_exception_handlers
from a11ycheck.platform.logger import LOG_FORMAT, get_logger
from a11ycheck.platform.services.email import build_mail_transport

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_TABLES:
        await create_tables()
    logger.info(f"Email service: {'Configured' if app.state.mail_transport else 'Not configured'}")
    logger.info(f"CORS enabled for: {', '.join(settings.CORS_ORIGINS)}")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Accessibility scanning API: scan a URL, keep the history, email the report",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.scanner = build_scanner(settings)
    app.state.mail_transport = build_mail_transport(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    add_exception_handlers(app)

    @app.get("/", tags=["Info"])
    def root():
        return {
            "app_name": settings.APP_NAME,
            "description": "Accessibility API is running. Use POST /scan to scan a website.",
            "version": "1.0.0",
            "docs_url": "/docs",
        }

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(scan_router)
    app.include_router(email_router)

    return app


app = create_app()
