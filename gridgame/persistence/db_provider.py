"""Implementación PostgreSQL de PersistenceProvider."""

from __future__ import annotations

import importlib
import json
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from ..state import GameState
from .provider import PersistenceProvider, VersionConflictError

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DatabasePersistenceProvider(PersistenceProvider):
    """Persistencia transaccional en PostgreSQL con control optimista por columna `version`."""

    def __init__(self, dsn: str | None = None, run_migrations: bool = True) -> None:
        self._dsn = (dsn or os.getenv("DATABASE_URL", "")).strip()
        if not self._dsn:
            raise RuntimeError("DATABASE_URL no configurada para PERSISTENCE_MODE=db")
        try:
            self._psycopg = importlib.import_module("psycopg")
        except ModuleNotFoundError as exc:
            raise RuntimeError(
                "Falta dependencia 'psycopg'. Instala el extra [db] para usar PERSISTENCE_MODE=db."
            ) from exc
        if run_migrations:
            self.apply_migrations()

    @contextmanager
    def _connection(self):
        conn = self._psycopg.connect(self._dsn, autocommit=False)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _split_sql_script(script: str) -> list[str]:
        chunks = []
        current = []
        for line in script.splitlines():
            current.append(line)
            if line.strip().endswith(";"):
                statement = "\n".join(current).strip()
                if statement:
                    chunks.append(statement)
                current = []
        if current:
            statement = "\n".join(current).strip()
            if statement:
                chunks.append(statement)
        return chunks

    def apply_migrations(self) -> None:
        migrations_dir = PROJECT_ROOT / "migrations"
        if not migrations_dir.exists():
            return
        migration_files = sorted(p for p in migrations_dir.glob("*.sql") if p.is_file())
        if not migration_files:
            return
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schema_migrations (
                        version VARCHAR PRIMARY KEY,
                        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    );
                    """
                )
                for migration in migration_files:
                    version = migration.name
                    cur.execute("SELECT 1 FROM schema_migrations WHERE version = %s", (version,))
                    if cur.fetchone():
                        continue
                    sql_script = migration.read_text(encoding="utf-8")
                    for statement in self._split_sql_script(sql_script):
                        cur.execute(statement)
                    cur.execute(
                        "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, %s)",
                        (version, _utc_now()),
                    )

    def create_game(self, state: GameState) -> GameState:
        with self._connection() as conn:
            with conn.cursor() as cur:
                now = _utc_now()
                cur.execute(
                    """
                    INSERT INTO games (id, size, win_length, status, version, state_json, created_at, updated_at)
                    VALUES (%s, %s, %s, %s, %s, %s::jsonb, %s, %s)
                    """,
                    (
                        state.id,
                        state.size,
                        state.win_length,
                        state.status.value,
                        state.version,
                        json.dumps(state.to_dict(), ensure_ascii=False),
                        state.created_at,
                        now,
                    ),
                )
        return state

    def get_game(self, game_id: str) -> GameState:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT state_json FROM games WHERE id::text = %s", (game_id,))
                row = cur.fetchone()
                if not row:
                    raise KeyError(f"Game not found: {game_id}")
                data = row[0]
                if isinstance(data, str):
                    data = json.loads(data)
                return GameState.from_dict(data)

    def save_game_state(self, state: GameState, expected_version: str) -> GameState:
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE games
                    SET status = %s, version = %s, state_json = %s::jsonb, updated_at = %s
                    WHERE id::text = %s AND version = %s
                    """,
                    (
                        state.status.value,
                        state.version,
                        json.dumps(state.to_dict(), ensure_ascii=False),
                        _utc_now(),
                        state.id,
                        expected_version,
                    ),
                )
                if cur.rowcount == 0:
                    cur.execute("SELECT version FROM games WHERE id::text = %s", (state.id,))
                    row = cur.fetchone()
                    if not row:
                        raise KeyError(f"Game not found: {state.id}")
                    raise VersionConflictError(state.id, expected_version, row[0])
        return state
