"""Shot endpoints: create from a script selection, create manually, edit, reorder, delete."""

import logging

from fastapi import APIRouter, HTTPException

from script_shots.api.schemas.shots import AssignResponse, ReorderRequest, SelectionRequest
from script_shots.models.shot import Shot, ShotDetails
from script_shots.services.errors import (
    InvalidOrderError,
    InvalidSelectionError,
    OutOfBoundsError,
    ScriptUnavailableError,
    ShotNotFoundError,
    StoreError,
)
from script_shots.services.shot_assigner import get_shot_assigner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scenes/{scene_id}/shots", tags=["shots"])


@router.get("")
async def list_shots(scene_id: str):
    try:
        shots = await get_shot_assigner().list_shots(scene_id)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"shots": shots}


@router.post("/from-selection", status_code=201, response_model=AssignResponse)
async def create_shot_from_selection(scene_id: str, req: SelectionRequest):
    """Convert the selected fragment into a numbered shot bound to its span."""
    details = ShotDetails(**req.model_dump(exclude={"fragment"}, exclude_unset=True))
    try:
        result = await get_shot_assigner().assign_shot(scene_id, req.fragment, details)
    except ScriptUnavailableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidSelectionError, OutOfBoundsError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Shot creation failed for scene %s: %s", scene_id, e)
        raise HTTPException(status_code=502, detail=str(e))
    return AssignResponse(shot=result.shot, status=result.status.value, warnings=result.warnings)


@router.post("", status_code=201, response_model=Shot)
async def create_manual_shot(scene_id: str, req: ShotDetails):
    """Create a shot that is not linked to any script text."""
    try:
        return await get_shot_assigner().create_manual_shot(scene_id, req)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.put("/order")
async def reorder_shots(scene_id: str, req: ReorderRequest):
    """Set the story order of the scene's shots; shot numbers stay as they are."""
    try:
        shots = await get_shot_assigner().reorder_shots(scene_id, req.shot_ids)
    except InvalidOrderError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"shots": shots}


@router.patch("/{shot_id}", response_model=Shot)
async def update_shot(scene_id: str, shot_id: str, req: ShotDetails):
    try:
        return await get_shot_assigner().update_shot(scene_id, shot_id, req)
    except ShotNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{shot_id}")
async def delete_shot(scene_id: str, shot_id: str):
    """Delete a shot and free the script span it claimed."""
    try:
        shot = await get_shot_assigner().delete_shot(scene_id, shot_id)
    except ShotNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "shot_number": shot.shot_number}
