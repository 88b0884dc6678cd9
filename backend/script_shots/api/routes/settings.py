"""Runtime settings endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

router = APIRouter(prefix="/api/settings", tags=["settings"])


class TitlePreviewRequest(BaseModel):
    chars: int


@router.get("")
async def get_settings():
    from script_shots.infra import config

    return {
        "settings": {
            "shot_title_preview_chars": config.SHOT_TITLE_PREVIEW_CHARS,
            "log_level": config.LOG_LEVEL,
        }
    }


@router.post("/title-preview")
async def save_title_preview(req: TitlePreviewRequest):
    """Change how many fragment characters a default shot title keeps."""
    from script_shots.infra.config import update_title_preview_chars

    try:
        update_title_preview_chars(req.chars)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "shot_title_preview_chars": req.chars}
