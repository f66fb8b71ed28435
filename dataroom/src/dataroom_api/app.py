"""Runtime entrypoint that layers custom behaviour on the generated FastAPI app."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi.middleware.cors import CORSMiddleware

from dataroom_api import main as generated_main
from dataroom_api.config import get_settings
from dataroom_api.db.migrations import upgrade_database
from dataroom_api.service.facade import get_data_room_services

LOGGER = logging.getLogger(__name__)

app = generated_main.app

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_sweeper_task: Optional[asyncio.Task] = None
_sweeper_stop: Optional[asyncio.Event] = None


@app.on_event("startup")
async def _startup() -> None:
    global _sweeper_task, _sweeper_stop
    upgrade_database()
    settings = get_settings()
    sweeper = get_data_room_services().sweeper
    if settings.sweep_interval_seconds > 0 and sweeper.enabled:
        _sweeper_stop = asyncio.Event()
        _sweeper_task = asyncio.create_task(
            sweeper.run_forever(settings.sweep_interval_seconds, _sweeper_stop)
        )
    elif settings.sweep_interval_seconds > 0:
        LOGGER.warning("Archive sweep interval set but archive_grace_days is not; sweep disabled")


@app.on_event("shutdown")
async def _shutdown() -> None:
    global _sweeper_task
    if _sweeper_stop is not None:
        _sweeper_stop.set()
    if _sweeper_task is not None:
        await _sweeper_task
        _sweeper_task = None
