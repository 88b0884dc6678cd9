"""Shot assigner: turns a script selection into a numbered, span-bound shot.

Every mutating operation for a scene runs under that scene's asyncio.Lock, so
the in-memory RangeRegistry is never touched by two assignments at once while
one of them is waiting on the Shot Store. Scenes do not block each other.
"""

import asyncio
import contextlib
import enum
import logging
from dataclasses import dataclass, field

from script_shots.infra import config
from script_shots.models.shot import Segment, Shot, ShotDetails, ShotInput, Span
from script_shots.services import highlight_segmenter
from script_shots.services.errors import (
    InvalidOrderError,
    InvalidSelectionError,
    OutOfBoundsError,
    ScriptUnavailableError,
    ShotNotFoundError,
)
from script_shots.services.interfaces import ScriptSource, ShotStore
from script_shots.services.range_registry import RangeRegistry
from script_shots.utils.span_locator import LocateError, collapse_whitespace, find_all, locate

logger = logging.getLogger(__name__)

# Fields a caller may change on an existing shot. Span, snippet and numbering
# are fixed at creation.
_EDITABLE_FIELDS = (
    "title",
    "description",
    "shot_type",
    "camera_angle",
    "movement",
    "dialogue",
    "action",
    "visual_notes",
)


class AssignStatus(str, enum.Enum):
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"  # overlap: shot created without a span
    DISCARDED = "discarded"  # scene closed before the store call returned


@dataclass
class AssignResult:
    shot: Shot
    status: AssignStatus
    warnings: list[str] = field(default_factory=list)


@dataclass
class _SceneState:
    script: str | None
    registry: RangeRegistry


def default_title(fragment: str) -> str:
    """Preview of the fragment: first N characters, plus "..." when longer."""
    text = collapse_whitespace(fragment.strip())
    limit = config.SHOT_TITLE_PREVIEW_CHARS
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def next_shot_number(shots: list[Shot]) -> int:
    return max((s.shot_number for s in shots), default=0) + 1


def next_sequence_order(shots: list[Shot]) -> int:
    return max((s.sequence_order for s in shots), default=0) + 1


class ShotAssigner:
    """Own the per-scene RangeRegistry and create/delete shots against it."""

    def __init__(self, script_source: ScriptSource, shot_store: ShotStore):
        self._script_source = script_source
        self._shot_store = shot_store
        self._scenes: dict[str, _SceneState] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}  # holders + waiters per scene

    @contextlib.asynccontextmanager
    async def _lock(self, scene_id: str):
        lock = self._locks.setdefault(scene_id, asyncio.Lock())
        self._lock_users[scene_id] = self._lock_users.get(scene_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[scene_id] -= 1
            if not self._lock_users[scene_id]:
                del self._lock_users[scene_id]
                if scene_id not in self._scenes:
                    self._locks.pop(scene_id, None)

    # ── Scene lifecycle ───────────────────────────────

    async def load_scene(self, scene_id: str) -> RangeRegistry:
        """(Re)build the scene's registry from the Script Source and Shot Store."""
        async with self._lock(scene_id):
            return (await self._load(scene_id)).registry

    def close_scene(self, scene_id: str) -> None:
        """Forget the scene. In-flight assignments for it will be discarded."""
        self._scenes.pop(scene_id, None)
        if scene_id not in self._lock_users:
            self._locks.pop(scene_id, None)

    def is_open(self, scene_id: str) -> bool:
        return scene_id in self._scenes

    async def _load(self, scene_id: str) -> _SceneState:
        script = await self._script_source.get_script_text(scene_id)
        shots = await self._shot_store.list_shots(scene_id)
        state = _SceneState(script=script, registry=RangeRegistry.from_shots(shots))
        self._scenes[scene_id] = state
        logger.info(
            "Loaded scene %s: %d shots, %d claimed ranges",
            scene_id, len(shots), len(state.registry),
        )
        return state

    async def _ensure_loaded(self, scene_id: str) -> _SceneState:
        state = self._scenes.get(scene_id)
        if state is None:
            state = await self._load(scene_id)
        return state

    # ── Queries ───────────────────────────────────────

    async def segments(self, scene_id: str) -> list[Segment]:
        """Highlight segmentation of the scene script; empty when there is no script."""
        async with self._lock(scene_id):
            state = await self._ensure_loaded(scene_id)
            if state.script is None:
                return []
            return highlight_segmenter.segments(state.script, state.registry.all_ranges())

    async def list_shots(self, scene_id: str) -> list[Shot]:
        """Shots of the scene in story order (sequence order, then number)."""
        shots = await self._shot_store.list_shots(scene_id)
        return sorted(shots, key=lambda s: (s.sequence_order, s.shot_number))

    # ── Mutations ─────────────────────────────────────

    async def assign_shot(
        self,
        scene_id: str,
        fragment: str,
        details: ShotDetails | None = None,
    ) -> AssignResult:
        """Create a shot bound to the span of ``fragment`` in the scene script.

        ``fragment`` must be the selection as captured at the moment of the
        user action. When the span overlaps an existing claim the shot is
        still created, without a span, and the status is PARTIAL_SUCCESS.
        Store failures propagate and leave the registry untouched.
        """
        details = details or ShotDetails()
        async with self._lock(scene_id):
            state = await self._ensure_loaded(scene_id)
            if state.script is None:
                raise ScriptUnavailableError(f"Scene {scene_id} has no script text")
            script = state.script

            try:
                span = locate(script, fragment)
            except LocateError as e:
                raise InvalidSelectionError(str(e)) from e
            if span.end > len(script):
                raise OutOfBoundsError(
                    f"Span [{span.start}, {span.end}) exceeds script length {len(script)}"
                )

            warnings: list[str] = []
            status = AssignStatus.SUCCESS
            if len(find_all(script, fragment)) > 1:
                warnings.append(
                    f"Selected text occurs more than once; bound to the first occurrence at {span.start}"
                )

            claim: Span | None = span
            clashes = state.registry.conflicts(span)
            if clashes:
                numbers = [r.shot_number for r in clashes]
                logger.warning(
                    "Selection [%d, %d) in scene %s overlaps shot(s) %s; creating shot without span",
                    span.start, span.end, scene_id, numbers,
                )
                warnings.append(
                    f"Selection overlaps shot(s) {', '.join(str(n) for n in numbers)}; "
                    "shot created without a script link"
                )
                status = AssignStatus.PARTIAL_SUCCESS
                claim = None

            snippet = claim.slice(script) if claim is not None else None
            # Fresh read immediately before commit; never a cached count.
            existing = await self._shot_store.list_shots(scene_id)
            shot_input = ShotInput(
                scene_id=scene_id,
                shot_number=next_shot_number(existing),
                title=details.title or default_title(fragment),
                description=details.description or fragment.strip(),
                shot_type=details.shot_type,
                camera_angle=details.camera_angle,
                movement=details.movement,
                dialogue=details.dialogue,
                action=details.action,
                visual_notes=details.visual_notes,
                span=claim,
                snippet=snippet,
                sequence_order=next_sequence_order(existing),
            )
            shot = await self._shot_store.create_shot(shot_input)

            if self._scenes.get(scene_id) is not state:
                logger.warning(
                    "Scene %s was closed while shot %d was being saved; result discarded",
                    scene_id, shot.shot_number,
                )
                return AssignResult(shot=shot, status=AssignStatus.DISCARDED, warnings=warnings)

            if claim is not None:
                state.registry.claim(claim, snippet, shot.shot_number)
            logger.info(
                "Created shot %d in scene %s (span=%s)",
                shot.shot_number, scene_id,
                f"[{claim.start}, {claim.end})" if claim is not None else None,
            )
            return AssignResult(shot=shot, status=status, warnings=warnings)

    async def create_manual_shot(self, scene_id: str, details: ShotDetails) -> Shot:
        """Create a spanless shot that is not bound to any script text."""
        async with self._lock(scene_id):
            existing = await self._shot_store.list_shots(scene_id)
            number = next_shot_number(existing)
            shot = await self._shot_store.create_shot(
                ShotInput(
                    scene_id=scene_id,
                    shot_number=number,
                    title=details.title or f"Shot {number}",
                    description=details.description or "",
                    shot_type=details.shot_type,
                    camera_angle=details.camera_angle,
                    movement=details.movement,
                    dialogue=details.dialogue,
                    action=details.action,
                    visual_notes=details.visual_notes,
                    sequence_order=next_sequence_order(existing),
                )
            )
            logger.info("Created manual shot %d in scene %s", shot.shot_number, scene_id)
            return shot

    async def update_shot(self, scene_id: str, shot_id: str, details: ShotDetails) -> Shot:
        """Update descriptive fields explicitly set on ``details``."""
        fields = {
            k: v for k, v in details.model_dump(exclude_unset=True).items()
            if k in _EDITABLE_FIELDS
        }
        async with self._lock(scene_id):
            shot = await self._shot_store.get_shot(shot_id)
            if shot is None or shot.scene_id != scene_id:
                raise ShotNotFoundError(f"Shot {shot_id} not found in scene {scene_id}")
            if not fields:
                return shot
            return await self._shot_store.update_shot(shot_id, fields)

    async def delete_shot(self, scene_id: str, shot_id: str) -> Shot:
        """Delete a shot and release the span it claimed."""
        async with self._lock(scene_id):
            shot = await self._shot_store.get_shot(shot_id)
            if shot is None or shot.scene_id != scene_id:
                raise ShotNotFoundError(f"Shot {shot_id} not found in scene {scene_id}")
            await self._shot_store.delete_shot(shot_id)
            state = self._scenes.get(scene_id)
            if state is not None:
                state.registry.release(shot.shot_number)
            logger.info("Deleted shot %d from scene %s", shot.shot_number, scene_id)
            return shot

    async def reorder_shots(self, scene_id: str, shot_ids: list[str]) -> list[Shot]:
        """Set the story order of a scene's shots.

        ``shot_ids`` must name every shot of the scene exactly once; their
        ``sequence_order`` becomes 1..n in that order. Shot numbers and
        claimed ranges are unchanged.
        """
        async with self._lock(scene_id):
            existing = await self._shot_store.list_shots(scene_id)
            if len(set(shot_ids)) != len(shot_ids) or set(shot_ids) != {s.id for s in existing}:
                raise InvalidOrderError(
                    f"Order for scene {scene_id} must list each of its {len(existing)} shots once"
                )
            orders = {shot_id: i for i, shot_id in enumerate(shot_ids, start=1)}
            await self._shot_store.set_sequence_orders(scene_id, orders)
            logger.info("Reordered %d shots in scene %s", len(orders), scene_id)
            shots = await self._shot_store.list_shots(scene_id)
        return sorted(shots, key=lambda s: (s.sequence_order, s.shot_number))


_assigner: ShotAssigner | None = None


def get_shot_assigner() -> ShotAssigner:
    """Return module-level singleton ShotAssigner backed by the SQLite stores."""
    global _assigner
    if _assigner is None:
        from script_shots.db import scene_store, shot_store

        _assigner = ShotAssigner(scene_store, shot_store)
    return _assigner
