"""
FastAPI app entrypoint.

Booths POST health pings to /api/health/ping; operators read and edit booths under /api/booths.
One AlertingCoordinator is built per app and shared by ingestion and the background sweeps.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

# Load .env from the project root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from boothwatch.api.routes import booths, health
from boothwatch.config import Settings, settings as default_settings
from boothwatch.core.clock import Clock, utc_now
from boothwatch.db.session import SessionLocal
from boothwatch.scheduler.sweeps import build_scheduler
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.slack_notify import Notifier, SlackNotifier

logger = logging.getLogger(__name__)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the dashboard host
_DEV_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:5174",
]


def create_app(
    settings: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
    notifier: Notifier | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    settings = settings or default_settings
    notifier = notifier or SlackNotifier(
        token=settings.slack_bot_token,
        channel=settings.slack_channel,
        api_url=settings.slack_api_url,
        timeout=settings.slack_timeout_seconds,
    )
    session_factory = session_factory or SessionLocal
    coordinator = AlertingCoordinator(
        session_factory=session_factory,
        notifier=notifier,
        settings=settings,
        clock=clock,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if settings.scheduler_enabled:
            scheduler = build_scheduler(coordinator, settings)
            scheduler.start()
            app.state.scheduler = scheduler
        logger.info("Booth monitor ready (scheduler %s)", "on" if scheduler else "off")
        yield
        if scheduler is not None:
            scheduler.shutdown(wait=False)

    app = FastAPI(title="Booth Watch", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.coordinator = coordinator
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_DEV_CORS_ORIGINS + settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(booths.router, prefix="/api", tags=["booths"])

    @app.get("/health")
    def liveness() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
