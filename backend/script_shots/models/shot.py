"""Shot, span and segmentation models.

All offsets are Unicode codepoint offsets, i.e. plain Python ``str`` indices,
into the canonical script text of one scene.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class Span(BaseModel):
    """Half-open ``[start, end)`` range into a scene script."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def check_order(self) -> Span:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")
        return self

    def intersects(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


class ClaimedRange(BaseModel):
    """A span bound to a committed shot."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str  # substring at claim time, kept even if the script changes
    shot_number: int

    @property
    def span(self) -> Span:
        return Span(start=self.start, end=self.end)


class ShotDetails(BaseModel):
    """User-provided descriptive fields for a new or edited shot."""

    title: str | None = None
    description: str | None = None
    shot_type: str = "medium"
    camera_angle: str = "eye-level"
    movement: str = "static"
    dialogue: str | None = None
    action: str | None = None
    visual_notes: str | None = None


class ShotInput(BaseModel):
    scene_id: str
    shot_number: int
    title: str
    description: str = ""
    shot_type: str = "medium"
    camera_angle: str = "eye-level"
    movement: str = "static"
    dialogue: str | None = None
    action: str | None = None
    visual_notes: str | None = None
    span: Span | None = None
    snippet: str | None = None
    sequence_order: int = 1


class Shot(ShotInput):
    id: str
    created_at: str | None = None
    updated_at: str | None = None


class Segment(BaseModel):
    text: str
    claimed: bool = False
    shot_number: int | None = None
