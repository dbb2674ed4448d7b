"""Tests unitarios de SessionCoordinator: creación, identidad, turnos e idempotencia."""

import json

import pytest

from gridgame.config import GameSettings
from gridgame.core import GameEngine, SessionCoordinator
from gridgame.errors import (
    CellOccupiedError,
    ErrorKind,
    GameFinishedError,
    GameFullError,
    GameNotFoundError,
    InvalidSizeError,
    NotYourTurnError,
    OutOfBoundsError,
)
from gridgame.persistence.json_provider import JsonPersistenceProvider
from gridgame.state import GameStatus, Mark

ALICE = "sess-alice"
BOB = "sess-bob"
CAROL = "sess-carol"


def _started_game(coordinator):
    """Partida 3×3 con X (alice) y O (bob) ya ligados; turno de X."""
    view = coordinator.create_game(session_id=ALICE)
    coordinator.make_move(view.id, 0, 0, session_id=ALICE)
    coordinator.make_move(view.id, 1, 1, session_id=BOB)
    return view.id


def test_create_game_uses_default_size_and_binds_creator_as_x(coordinator):
    view = coordinator.create_game(session_id=ALICE)

    assert view.size == 3
    assert view.win_length == 3
    assert view.status is GameStatus.CREATED
    assert view.moves_count == 0
    assert len(view.cells) == 9
    assert all(c.value is Mark.EMPTY for c in view.cells)
    assert view.your_symbol is Mark.X
    assert view.is_your_turn is True
    assert view.current_player_session_id == ALICE
    assert view.version


@pytest.mark.parametrize("size", [2, 0, -1])
def test_create_game_with_small_size_fails(coordinator, size):
    with pytest.raises(InvalidSizeError) as exc_info:
        coordinator.create_game(session_id=ALICE, size=size)
    assert exc_info.value.kind is ErrorKind.INVALID_SIZE


def test_create_game_clamps_win_length_to_board(json_provider, engine):
    settings = GameSettings(default_size=5, win_length=4)
    coordinator = SessionCoordinator(json_provider, settings=settings, engine=engine)

    assert coordinator.create_game(session_id=ALICE).win_length == 4
    assert coordinator.create_game(session_id=ALICE, size=3).win_length == 3
    assert coordinator.create_game(session_id=ALICE, size=8).win_length == 4


def test_get_game_unknown_id_fails_not_found(coordinator):
    with pytest.raises(GameNotFoundError):
        coordinator.get_game("no-such-game", ALICE)


def test_make_move_unknown_id_fails_not_found(coordinator):
    with pytest.raises(GameNotFoundError):
        coordinator.make_move("no-such-game", 0, 0, session_id=ALICE)


def test_top_row_scenario_wins_for_x(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    moves = [(ALICE, 0, 0), (BOB, 1, 1), (ALICE, 0, 1), (BOB, 1, 0), (ALICE, 0, 2)]

    for session_id, row, column in moves:
        view = coordinator.make_move(game_id, row, column, session_id=session_id)

    assert view.status is GameStatus.WON
    assert view.winner is Mark.X
    assert view.moves_count == 5


def test_turns_alternate_once_both_players_are_bound(coordinator):
    game_id = _started_game(coordinator)

    assert coordinator.get_game(game_id, ALICE).is_your_turn is True
    assert coordinator.get_game(game_id, BOB).is_your_turn is False

    coordinator.make_move(game_id, 2, 2, session_id=ALICE)

    assert coordinator.get_game(game_id, ALICE).is_your_turn is False
    assert coordinator.get_game(game_id, BOB).is_your_turn is True


def test_moving_out_of_turn_fails_even_on_empty_cell(coordinator):
    game_id = _started_game(coordinator)
    with pytest.raises(NotYourTurnError):
        coordinator.make_move(game_id, 2, 2, session_id=BOB)


def test_second_session_cannot_open_the_game(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    with pytest.raises(NotYourTurnError):
        coordinator.make_move(game_id, 0, 0, session_id=BOB)
    assert coordinator.get_game(game_id, BOB).your_symbol is None


def test_sole_participant_keeps_the_turn_until_opponent_joins(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id

    first = coordinator.make_move(game_id, 0, 0, session_id=ALICE)
    assert first.is_your_turn is True
    second = coordinator.make_move(game_id, 2, 2, session_id=ALICE)
    assert second.moves_count == 2

    joined = coordinator.make_move(game_id, 1, 1, session_id=BOB)
    assert joined.your_symbol is Mark.O
    assert joined.is_your_turn is False
    assert joined.current_player_session_id == ALICE


def test_third_session_is_rejected_with_game_full(coordinator):
    game_id = _started_game(coordinator)
    with pytest.raises(GameFullError):
        coordinator.make_move(game_id, 2, 2, session_id=CAROL)


def test_rejected_join_does_not_bind_player(coordinator, json_provider):
    game_id = coordinator.create_game(session_id=ALICE).id
    coordinator.make_move(game_id, 0, 0, session_id=ALICE)

    with pytest.raises(CellOccupiedError):
        coordinator.make_move(game_id, 0, 0, session_id=BOB)

    assert json_provider.get_game(game_id).player_o is None
    # El hueco sigue libre: otra sesión puede unirse.
    assert coordinator.make_move(game_id, 1, 1, session_id=CAROL).your_symbol is Mark.O


def test_out_of_bounds_move_is_rejected(coordinator):
    game_id = coordinator.create_game(session_id=ALICE, size=4).id
    with pytest.raises(OutOfBoundsError):
        coordinator.make_move(game_id, 4, 0, session_id=ALICE)


def test_moves_after_win_fail_with_game_finished(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    for session_id, row, column in [(ALICE, 0, 0), (BOB, 1, 1), (ALICE, 0, 1), (BOB, 1, 0), (ALICE, 0, 2)]:
        coordinator.make_move(game_id, row, column, session_id=session_id)

    with pytest.raises(GameFinishedError):
        coordinator.make_move(game_id, 2, 2, session_id=BOB)


def test_matching_version_token_replays_without_mutation(coordinator, json_provider):
    game_id = coordinator.create_game(session_id=ALICE).id
    committed = coordinator.make_move(game_id, 0, 0, session_id=ALICE)

    first = coordinator.make_move(game_id, 2, 2, session_id=ALICE, expected_version=committed.version)
    second = coordinator.make_move(game_id, 2, 2, session_id=ALICE, expected_version=committed.version)

    assert first == second
    assert first.to_dict() == committed.to_dict()
    stored = json_provider.get_game(game_id)
    assert stored.version == committed.version
    assert stored.moves_count == 1


def test_stale_version_token_is_evaluated_normally(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    created_version = coordinator.get_game(game_id, ALICE).version
    coordinator.make_move(game_id, 0, 0, session_id=ALICE)

    view = coordinator.make_move(game_id, 2, 2, session_id=ALICE, expected_version=created_version)

    assert view.moves_count == 2


def test_empty_version_token_does_not_short_circuit(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    view = coordinator.make_move(game_id, 0, 0, session_id=ALICE, expected_version="")
    assert view.moves_count == 1


def test_version_changes_on_every_committed_move(coordinator):
    game_id = coordinator.create_game(session_id=ALICE).id
    seen = {coordinator.get_game(game_id).version}
    for session_id, row, column in [(ALICE, 0, 0), (BOB, 1, 1), (ALICE, 2, 2), (BOB, 0, 2)]:
        seen.add(coordinator.make_move(game_id, row, column, session_id=session_id).version)
    assert len(seen) == 5


def test_swap_rule_is_applied_through_coordinator(json_provider):
    coordinator = SessionCoordinator(json_provider, engine=GameEngine(GameSettings(), rng=lambda: 0.0))
    game_id = coordinator.create_game(session_id=ALICE).id
    for session_id, row, column in [(ALICE, 0, 0), (BOB, 1, 1), (ALICE, 2, 2)]:
        coordinator.make_move(game_id, row, column, session_id=session_id)

    view = coordinator.make_move(game_id, 0, 2, session_id=BOB)

    cell = next(c for c in view.cells if (c.row, c.column) == (0, 2))
    assert cell.value is Mark.X
    assert view.your_symbol is Mark.O


@pytest.mark.parametrize("game_id", ["..", ".", "not-a-uuid", "../escape", ""])
def test_path_like_or_malformed_ids_are_not_found(coordinator, game_id):
    with pytest.raises(GameNotFoundError):
        coordinator.get_game(game_id, ALICE)
    with pytest.raises(GameNotFoundError):
        coordinator.make_move(game_id, 0, 0, session_id=ALICE)


def test_game_stored_outside_games_dir_is_unreachable(tmp_path, engine):
    games_dir = tmp_path / "games"
    outside = SessionCoordinator(JsonPersistenceProvider(base_path=tmp_path), engine=engine)
    outside_id = outside.create_game(session_id=ALICE).id
    (tmp_path / "state.json").write_text(
        (tmp_path / outside_id / "state.json").read_text(encoding="utf-8"), encoding="utf-8"
    )
    coordinator = SessionCoordinator(JsonPersistenceProvider(base_path=games_dir), engine=engine)

    with pytest.raises(GameNotFoundError):
        coordinator.get_game("..", ALICE)


def test_create_game_without_session_id_is_a_typed_error(coordinator):
    with pytest.raises(NotYourTurnError):
        coordinator.create_game(session_id="")


def test_corrupt_stored_game_is_not_reported_as_missing(coordinator, json_provider, tmp_path):
    game_id = coordinator.create_game(session_id=ALICE).id
    path = tmp_path / game_id / "state.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    del data["win_length"]
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(ValueError) as exc_info:
        coordinator.get_game(game_id, ALICE)
    assert not isinstance(exc_info.value, GameNotFoundError)
