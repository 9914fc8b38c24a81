"""Shared route dependencies: store, coordinator, clock and settings from app.state."""
from datetime import datetime

from fastapi import Request

from boothwatch.config import Settings
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.store import BoothStore


def get_store(request: Request):
    db = request.app.state.session_factory()
    try:
        yield BoothStore(db)
    finally:
        db.close()


def get_coordinator(request: Request) -> AlertingCoordinator:
    return request.app.state.coordinator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_now(request: Request) -> datetime:
    return request.app.state.clock()
