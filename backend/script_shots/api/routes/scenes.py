"""Scene script endpoints and highlight segmentation."""

from fastapi import APIRouter, HTTPException

from script_shots.api.schemas.shots import SceneScriptRequest, SegmentsResponse
from script_shots.db import scene_store
from script_shots.services.errors import StoreError
from script_shots.services.shot_assigner import get_shot_assigner

router = APIRouter(prefix="/api/scenes", tags=["scenes"])


@router.put("/{scene_id}")
async def put_scene(scene_id: str, req: SceneScriptRequest):
    """Create a scene or replace its script text.

    Stored spans are not re-validated against the new text; their snippets
    stay the display source of truth.
    """
    try:
        await scene_store.upsert_scene(scene_id, req.script_text, req.title)
        registry = await get_shot_assigner().load_scene(scene_id)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "scene_id": scene_id, "claimed_ranges": len(registry)}


@router.get("/{scene_id}/segments", response_model=SegmentsResponse)
async def get_segments(scene_id: str):
    """Highlight segmentation of the scene script plus its shots."""
    assigner = get_shot_assigner()
    try:
        segments = await assigner.segments(scene_id)
        shots = await assigner.list_shots(scene_id)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return SegmentsResponse(
        scene_id=scene_id,
        has_script=bool(segments),
        segments=segments,
        shots=shots,
    )


@router.post("/{scene_id}/close")
async def close_scene(scene_id: str):
    """Navigation away from the scene; pending assignments are discarded."""
    get_shot_assigner().close_scene(scene_id)
    return {"ok": True}
