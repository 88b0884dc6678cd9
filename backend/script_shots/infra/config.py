import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path(os.environ.get("SCRIPT_SHOTS_DATA_DIR", Path.home() / ".script-shots"))
DB_PATH = DATA_DIR / "data.db"

# Default shot title = first N characters of the selected fragment + "..."
SHOT_TITLE_PREVIEW_CHARS = int(os.environ.get("SHOT_TITLE_PREVIEW_CHARS", "30"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "info")

# Comma-separated list of allowed browser origins for the presentation layer
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]


def update_title_preview_chars(chars: int) -> None:
    """Update SHOT_TITLE_PREVIEW_CHARS at runtime."""
    global SHOT_TITLE_PREVIEW_CHARS  # noqa: PLW0603

    if chars < 1:
        raise ValueError("Title preview length must be positive")
    SHOT_TITLE_PREVIEW_CHARS = chars


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
