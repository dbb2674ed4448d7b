"""Modelos Pydantic para requests/responses de la API."""

from typing import Optional
from pydantic import BaseModel, Field


# --- POST /games ---
class CreateGameRequest(BaseModel):
    size: Optional[int] = None
    player_session_id: str = Field(min_length=1, max_length=200)


# --- POST /games/{game_id}/moves ---
class MakeMoveRequest(BaseModel):
    row: int
    column: int
    player_session_id: str = Field(min_length=1, max_length=200)
    etag: Optional[str] = None


# --- Respuesta común ---
class CellOut(BaseModel):
    row: int
    column: int
    value: str


class GameResponse(BaseModel):
    id: str
    size: int
    win_length: int
    status: str
    current_player_session_id: Optional[str] = None
    cells: list[CellOut] = Field(default_factory=list)
    etag: str
    moves_count: int = 0
    is_your_turn: bool = False
    your_symbol: Optional[str] = None
    winner: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: str
    kind: str


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"
