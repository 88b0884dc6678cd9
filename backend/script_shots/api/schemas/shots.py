"""Pydantic request/response schemas for scene and shot endpoints."""

from pydantic import BaseModel

from script_shots.models.shot import Segment, Shot, ShotDetails


class SceneScriptRequest(BaseModel):
    script_text: str
    title: str | None = None


class SelectionRequest(ShotDetails):
    fragment: str  # selection snapshot taken when the user asked for a shot


class AssignResponse(BaseModel):
    shot: Shot
    status: str  # success / partial_success / discarded
    warnings: list[str] = []


class SegmentsResponse(BaseModel):
    scene_id: str
    has_script: bool
    segments: list[Segment]
    shots: list[Shot]


class ReorderRequest(BaseModel):
    shot_ids: list[str]  # every shot of the scene, in the new story order
