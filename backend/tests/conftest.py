"""Shared test fixtures for backend tests."""

import uuid
from unittest.mock import patch

import aiosqlite
import pytest
import pytest_asyncio

from script_shots.models.shot import Shot, ShotInput
from script_shots.services.errors import StoreError
from script_shots.services.shot_assigner import ShotAssigner

# Schema copied from script_shots/db/sqlite_db.py (inline to avoid importing config)
_TEST_SCHEMA = """
CREATE TABLE IF NOT EXISTS scenes (
    id              TEXT PRIMARY KEY,
    title           TEXT,
    script_text     TEXT,
    created_at      TEXT DEFAULT (datetime('now')),
    updated_at      TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS shots (
    id                  TEXT PRIMARY KEY,
    scene_id            TEXT NOT NULL REFERENCES scenes(id) ON DELETE CASCADE,
    shot_number         INTEGER NOT NULL,
    title               TEXT NOT NULL,
    description         TEXT DEFAULT '',
    shot_type           TEXT DEFAULT 'medium',
    camera_angle        TEXT DEFAULT 'eye-level',
    movement            TEXT DEFAULT 'static',
    dialogue            TEXT,
    action              TEXT,
    visual_notes        TEXT,
    script_text_start   INTEGER,
    script_text_end     INTEGER,
    script_text_snippet TEXT,
    sequence_order      INTEGER DEFAULT 1,
    created_at          TEXT DEFAULT (datetime('now')),
    updated_at          TEXT DEFAULT (datetime('now')),
    UNIQUE(scene_id, shot_number)
);
"""

SCENE_ID = "scene-001"
SCRIPT = "INT. ROOM - DAY\nJohn enters.\nHe sits down."


@pytest_asyncio.fixture
async def memory_db():
    """Create an in-memory SQLite database with full schema."""
    conn = await aiosqlite.connect(":memory:")
    await conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = aiosqlite.Row
    await conn.executescript(_TEST_SCHEMA)
    await conn.commit()
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def mock_get_connection(memory_db):
    """Patch get_connection to return a shared in-memory DB.

    We wrap the real connection so close() is a no-op during tests
    (the fixture manages the lifecycle).
    """

    class _NonClosingConnection:
        """Proxy that prevents the stores from closing the shared conn."""

        def __init__(self, conn):
            self._conn = conn

        def __getattr__(self, name):
            return getattr(self._conn, name)

        async def close(self):
            pass  # no-op

    async def _factory():
        return _NonClosingConnection(memory_db)

    with patch("script_shots.db.shot_store.get_connection", _factory), \
         patch("script_shots.db.scene_store.get_connection", _factory):
        yield memory_db


class FakeScriptSource:
    def __init__(self, scripts: dict[str, str] | None = None):
        self.scripts = dict(scripts or {})

    async def get_script_text(self, scene_id: str) -> str | None:
        return self.scripts.get(scene_id)


class FakeShotStore:
    """Dict-backed Shot Store; ``fail_next`` makes the next write raise."""

    def __init__(self):
        self.shots: dict[str, Shot] = {}
        self.fail_next = False
        self.list_calls = 0

    async def list_shots(self, scene_id: str) -> list[Shot]:
        self.list_calls += 1
        return sorted(
            (s for s in self.shots.values() if s.scene_id == scene_id),
            key=lambda s: s.shot_number,
        )

    async def get_shot(self, shot_id: str) -> Shot | None:
        return self.shots.get(shot_id)

    async def create_shot(self, shot: ShotInput) -> Shot:
        if self.fail_next:
            self.fail_next = False
            raise StoreError("database is locked")
        stored = Shot(id=str(uuid.uuid4()), **shot.model_dump())
        self.shots[stored.id] = stored
        return stored

    async def update_shot(self, shot_id: str, fields: dict) -> Shot:
        updated = self.shots[shot_id].model_copy(update=fields)
        self.shots[shot_id] = updated
        return updated

    async def set_sequence_orders(self, scene_id: str, orders: dict[str, int]) -> None:
        if self.fail_next:
            self.fail_next = False
            raise StoreError("database is locked")
        for shot_id, order in orders.items():
            self.shots[shot_id] = self.shots[shot_id].model_copy(update={"sequence_order": order})

    async def delete_shot(self, shot_id: str) -> None:
        if self.fail_next:
            self.fail_next = False
            raise StoreError("database is locked")
        self.shots.pop(shot_id, None)


@pytest.fixture
def script_source():
    return FakeScriptSource({SCENE_ID: SCRIPT})


@pytest.fixture
def shot_store():
    return FakeShotStore()


@pytest.fixture
def assigner(script_source, shot_store):
    return ShotAssigner(script_source, shot_store)
