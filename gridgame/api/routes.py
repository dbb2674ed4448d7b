"""Endpoints HTTP para el coordinador de partidas."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from gridgame.core import GameView
from gridgame.errors import ErrorKind, GameError

from .dependencies import get_coordinator
from .schemas import CreateGameRequest, ErrorResponse, GameResponse, MakeMoveRequest

router = APIRouter(prefix="/games", tags=["games"])

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONCURRENT_MODIFICATION: 409,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def game_error_handler(_request, exc: GameError) -> JSONResponse:
    """Traduce errores de dominio a respuestas HTTP con `detail` y `kind`."""
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, 400),
        content={"detail": exc.message, "kind": exc.kind.value},
    )


def _to_response(view: GameView, response: Response) -> GameResponse:
    # El token de versión viaja tal cual; el cliente lo reenvía en `etag`.
    response.headers["ETag"] = view.version
    return GameResponse(**view.to_dict())


@router.post("", response_model=GameResponse, responses=_ERROR_RESPONSES)
def create_game(
    body: CreateGameRequest,
    response: Response,
    coordinator=Depends(get_coordinator),
):
    """Crea una partida; quien la crea juega con X."""
    view = coordinator.create_game(session_id=body.player_session_id, size=body.size)
    return _to_response(view, response)


@router.get("/{game_id}", response_model=GameResponse, responses=_ERROR_RESPONSES)
def get_game(
    game_id: str,
    response: Response,
    player_session_id: str | None = None,
    coordinator=Depends(get_coordinator),
):
    """Devuelve la partida proyectada para `player_session_id` (opcional)."""
    view = coordinator.get_game(game_id, player_session_id)
    return _to_response(view, response)


@router.post("/{game_id}/moves", response_model=GameResponse, responses=_ERROR_RESPONSES)
def make_move(
    game_id: str,
    body: MakeMoveRequest,
    response: Response,
    coordinator=Depends(get_coordinator),
):
    """Aplica una jugada. Con `etag` igual a la versión actual no hace nada (reintento idempotente)."""
    view = coordinator.make_move(
        game_id,
        row=body.row,
        column=body.column,
        session_id=body.player_session_id,
        expected_version=body.etag,
    )
    return _to_response(view, response)
