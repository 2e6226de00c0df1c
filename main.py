import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notifyhub.application.channels import reset_dispatch_scheduler
from notifyhub.config import get_settings
from notifyhub.infrastructure.database import get_tenant_router, reset_tenant_router
from notifyhub.infrastructure.notifications import notification_manager
from notifyhub.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the default database and realtime loop, release workers on exit."""

    get_tenant_router().get_engine(None)
    notification_manager.bind_loop(asyncio.get_running_loop())
    logger.info("%s notification service started", get_settings().app_name)
    yield
    notification_manager.bind_loop(None)
    reset_dispatch_scheduler()
    reset_tenant_router()


def create_app() -> FastAPI:
    """Create and configure the main FastAPI application."""

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
