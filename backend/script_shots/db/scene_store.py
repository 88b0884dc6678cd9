"""Data access layer for scene scripts (the Script Source)."""

import aiosqlite

from script_shots.db.sqlite_db import get_connection
from script_shots.services.errors import StoreError


async def upsert_scene(scene_id: str, script_text: str, title: str | None = None) -> None:
    """Create a scene or replace its script text."""
    conn = await get_connection()
    try:
        await conn.execute(
            """
            INSERT INTO scenes (id, title, script_text)
            VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = COALESCE(excluded.title, scenes.title),
                script_text = excluded.script_text,
                updated_at = datetime('now')
            """,
            (scene_id, title, script_text),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to save scene {scene_id}: {e}") from e
    finally:
        await conn.close()


async def get_scene(scene_id: str) -> dict | None:
    conn = await get_connection()
    try:
        cursor = await conn.execute(
            "SELECT id, title, script_text, created_at, updated_at FROM scenes WHERE id = ?",
            (scene_id,),
        )
        row = await cursor.fetchone()
        return dict(row) if row else None
    finally:
        await conn.close()


async def get_script_text(scene_id: str) -> str | None:
    """Canonical script text of a scene, or None when there is none."""
    scene = await get_scene(scene_id)
    if not scene or not scene["script_text"]:
        return None
    return scene["script_text"]
