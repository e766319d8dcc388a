"""Runtime settings gathered from the environment."""

import os
import shlex
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

APP_NAME = "keykata"
SAVE_FILE_NAME = "save.json"
LOG_FILE_NAME = "keykata.log"
BUNDLED_CHALLENGES_DIR = Path(__file__).parent / "data" / "challenges"


def default_data_dir() -> Path:
    """Return the per-user data directory.

    Uses ``$XDG_DATA_HOME/keykata`` when the variable is set, otherwise
    ``~/.local/share/keykata``.
    """
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def default_challenges_dir() -> Path:
    """Locate the challenge tree: env override, ./challenges, then the bundled set."""
    override = os.environ.get("KEYKATA_CHALLENGES_DIR")
    if override:
        return Path(override)
    local = Path("challenges")
    if local.is_dir():
        return local
    return BUNDLED_CHALLENGES_DIR


def default_editor_command() -> list[str]:
    """Editor command line prefix; ``KEYKATA_EDITOR`` may hold extra arguments."""
    override = os.environ.get("KEYKATA_EDITOR")
    if override:
        return shlex.split(override)
    return ["nvim"]


class Settings(BaseModel):
    """Resolved runtime settings."""

    editor_command: list[str] = Field(default_factory=default_editor_command)
    challenges_dir: Path = Field(default_factory=default_challenges_dir)
    data_dir: Path = Field(default_factory=default_data_dir)
    workspace_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / APP_NAME,
        description="Scratch directory for editor session files",
    )
    log_level: str = Field(
        default_factory=lambda: os.environ.get("KEYKATA_LOG_LEVEL", "WARNING").upper()
    )
    unlock_all: bool = Field(default=False)

    @property
    def save_path(self) -> Path:
        """Progress file: ``./save.json`` if it exists, else inside the data dir."""
        local = Path(SAVE_FILE_NAME)
        if local.exists():
            return local
        return self.data_dir / SAVE_FILE_NAME

    @property
    def log_path(self) -> Path:
        return self.data_dir / LOG_FILE_NAME


def load_settings(unlock_all: bool = False, **overrides: Optional[object]) -> Settings:
    """Build settings from the environment, applying explicit overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(unlock_all=unlock_all, **values)
