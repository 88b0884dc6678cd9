"""Collaborator interfaces consumed by the shot assigner.

The SQLite modules ``script_shots.db.scene_store`` and
``script_shots.db.shot_store`` satisfy these protocols as plain modules.
"""

from typing import Any, Protocol

from script_shots.models.shot import Shot, ShotInput


class ScriptSource(Protocol):
    async def get_script_text(self, scene_id: str) -> str | None: ...


class ShotStore(Protocol):
    async def list_shots(self, scene_id: str) -> list[Shot]: ...

    async def get_shot(self, shot_id: str) -> Shot | None: ...

    async def create_shot(self, shot: ShotInput) -> Shot: ...

    async def update_shot(self, shot_id: str, fields: dict[str, Any]) -> Shot: ...

    async def delete_shot(self, shot_id: str) -> None: ...

    async def set_sequence_orders(self, scene_id: str, orders: dict[str, int]) -> None: ...
