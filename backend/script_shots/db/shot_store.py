"""CRUD operations for the shots table (the Shot Store)."""

import logging
import uuid
from typing import Any

import aiosqlite

from script_shots.db.sqlite_db import get_connection
from script_shots.models.shot import Shot, ShotInput, Span
from script_shots.services.errors import StoreError

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, scene_id, shot_number, title, description, shot_type, camera_angle,
    movement, dialogue, action, visual_notes, script_text_start,
    script_text_end, script_text_snippet, sequence_order, created_at, updated_at
"""

_UPDATABLE = {
    "title",
    "description",
    "shot_type",
    "camera_angle",
    "movement",
    "dialogue",
    "action",
    "visual_notes",
}


def _row_to_shot(row: aiosqlite.Row) -> Shot:
    data = dict(row)
    start = data.pop("script_text_start")
    end = data.pop("script_text_end")
    snippet = data.pop("script_text_snippet")
    span = Span(start=start, end=end) if start is not None and end is not None else None
    return Shot(**data, span=span, snippet=snippet if span is not None else None)


async def list_shots(scene_id: str) -> list[Shot]:
    """All shots of a scene ordered by shot number, spans included."""
    conn = await get_connection()
    try:
        cursor = await conn.execute(
            f"SELECT {_COLUMNS} FROM shots WHERE scene_id = ? ORDER BY shot_number",
            (scene_id,),
        )
        rows = await cursor.fetchall()
        return [_row_to_shot(row) for row in rows]
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to list shots for scene {scene_id}: {e}") from e
    finally:
        await conn.close()


async def get_shot(shot_id: str) -> Shot | None:
    conn = await get_connection()
    try:
        cursor = await conn.execute(f"SELECT {_COLUMNS} FROM shots WHERE id = ?", (shot_id,))
        row = await cursor.fetchone()
        return _row_to_shot(row) if row else None
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to load shot {shot_id}: {e}") from e
    finally:
        await conn.close()


async def create_shot(shot: ShotInput) -> Shot:
    """Insert a shot and return the stored record."""
    shot_id = str(uuid.uuid4())
    conn = await get_connection()
    try:
        await conn.execute(
            """
            INSERT INTO shots
                (id, scene_id, shot_number, title, description, shot_type,
                 camera_angle, movement, dialogue, action, visual_notes,
                 script_text_start, script_text_end, script_text_snippet,
                 sequence_order)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                shot_id,
                shot.scene_id,
                shot.shot_number,
                shot.title,
                shot.description,
                shot.shot_type,
                shot.camera_angle,
                shot.movement,
                shot.dialogue,
                shot.action,
                shot.visual_notes,
                shot.span.start if shot.span is not None else None,
                shot.span.end if shot.span is not None else None,
                shot.snippet if shot.span is not None else None,
                shot.sequence_order,
            ),
        )
        await conn.commit()
        cursor = await conn.execute(f"SELECT {_COLUMNS} FROM shots WHERE id = ?", (shot_id,))
        row = await cursor.fetchone()
        return _row_to_shot(row)
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to create shot {shot.shot_number} in scene {shot.scene_id}: {e}") from e
    finally:
        await conn.close()


async def update_shot(shot_id: str, fields: dict[str, Any]) -> Shot:
    """Update descriptive columns of a shot. Span and numbering columns are not writable."""
    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ValueError(f"Fields not updatable: {sorted(unknown)}")

    conn = await get_connection()
    try:
        if fields:
            assignments = ", ".join(f"{k} = ?" for k in fields)
            await conn.execute(
                f"UPDATE shots SET {assignments}, updated_at = datetime('now') WHERE id = ?",
                (*fields.values(), shot_id),
            )
            await conn.commit()
        cursor = await conn.execute(f"SELECT {_COLUMNS} FROM shots WHERE id = ?", (shot_id,))
        row = await cursor.fetchone()
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to update shot {shot_id}: {e}") from e
    finally:
        await conn.close()
    if row is None:
        raise StoreError(f"Shot {shot_id} does not exist")
    return _row_to_shot(row)


async def set_sequence_orders(scene_id: str, orders: dict[str, int]) -> None:
    """Write ``sequence_order`` for the given shot ids in one transaction."""
    conn = await get_connection()
    try:
        await conn.executemany(
            """
            UPDATE shots SET sequence_order = ?, updated_at = datetime('now')
            WHERE id = ? AND scene_id = ?
            """,
            [(order, shot_id, scene_id) for shot_id, order in orders.items()],
        )
        await conn.commit()
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to reorder shots in scene {scene_id}: {e}") from e
    finally:
        await conn.close()


async def delete_shot(shot_id: str) -> None:
    conn = await get_connection()
    try:
        cursor = await conn.execute("DELETE FROM shots WHERE id = ?", (shot_id,))
        deleted = cursor.rowcount
        await conn.commit()
    except aiosqlite.Error as e:
        raise StoreError(f"Failed to delete shot {shot_id}: {e}") from e
    finally:
        await conn.close()
    if deleted == 0:
        logger.warning("Delete of shot %s matched no rows", shot_id)
