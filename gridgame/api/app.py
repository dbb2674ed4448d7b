"""Aplicación FastAPI: partidas de tres en raya generalizado vía HTTP."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from gridgame.errors import GameError
from gridgame.logging_config import setup_api_logging

from .dependencies import get_persistence_provider
from .routes import game_error_handler, router
from .schemas import HealthResponse

_repo_root = Path(__file__).resolve().parents[2]
_logger = logging.getLogger(__name__)
load_dotenv(_repo_root / ".env")


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    setup_api_logging()
    try:
        # Crea el provider al arrancar (migraciones en modo db).
        get_persistence_provider()
    except Exception as exc:
        _logger.warning("Startup persistence bootstrap skipped: %s", exc)
    yield


app = FastAPI(
    title="Gridgame API",
    description="Tres en raya N×N con sesiones por jugador",
    version="0.1.0",
    lifespan=_lifespan,
)
app.include_router(router)
app.add_exception_handler(GameError, game_error_handler)


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")
