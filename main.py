import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from approvals.bootstrap import Services, build_services
from approvals.config import get_settings
from approvals.infrastructure.database import SessionLocal, engine, initialize_database
from approvals.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def create_app(services: Services | None = None, *, start_scheduler: bool | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``services`` defaults to components wired from the environment settings.
    The reminder scheduler starts with the application unless disabled in the
    settings or through ``start_scheduler``.
    """

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    owns_database = services is None
    if services is None:
        services = build_services(settings, SessionLocal)
    if start_scheduler is None:
        start_scheduler = settings.reminder_enabled

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise the database and scheduler, release them on shutdown."""

        if owns_database:
            initialize_database()
        if start_scheduler:
            services.scheduler.start()
        yield
        services.shutdown()
        if owns_database:
            engine.dispose()

    app = FastAPI(title="Project Approvals", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
