import aiosqlite

from script_shots.infra.config import DB_PATH, ensure_data_dir

_SCHEMA_SQL = """
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

CREATE INDEX IF NOT EXISTS idx_shots_scene ON shots(scene_id, shot_number);
"""


async def get_connection() -> aiosqlite.Connection:
    conn = await aiosqlite.connect(str(DB_PATH))
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = aiosqlite.Row
    return conn


async def init_db() -> None:
    ensure_data_dir()
    conn = await get_connection()
    try:
        await conn.executescript(_SCHEMA_SQL)
        await conn.commit()
    finally:
        await conn.close()
