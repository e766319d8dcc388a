"""JSON persistence for the game state."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import SaveError
from .state import GameState

logger = logging.getLogger(__name__)


def load_state(path: Path) -> GameState:
    """Read the game state from ``path``.

    A missing file gives a fresh state. Anything else that goes wrong raises,
    so a damaged save file is never silently replaced by empty progress.

    Raises:
        SaveError: if the file exists but cannot be read or decoded
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("No save file at %s, starting fresh", path)
        return GameState()
    except (OSError, UnicodeDecodeError) as e:
        raise SaveError(path, str(e)) from e

    try:
        return GameState.model_validate_json(raw)
    except ValidationError as e:
        raise SaveError(path, str(e)) from e


def save_state(state: GameState, path: Path) -> None:
    """Write ``state`` to ``path`` as pretty JSON, replacing the file atomically.

    Raises:
        OSError: if the directory or file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = state.model_dump_json(indent=2)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved progress to %s", path)


class ProgressStore:
    """Owns the live game state and the file it is persisted to."""

    def __init__(self, path: Path, state: Optional[GameState] = None):
        """Initialize the store.

        Args:
            path: Save file location
            state: Already-loaded state; a fresh one is used if omitted
        """
        self.path = path
        self.state = state if state is not None else GameState()

    @classmethod
    def open(cls, path: Path) -> "ProgressStore":
        """Load the store from ``path``.

        Raises:
            SaveError: if an existing save file is unreadable
        """
        return cls(path, load_state(path))

    def save(self) -> None:
        """Persist the current state.

        Raises:
            OSError: if writing fails
        """
        save_state(self.state, self.path)

    def try_save(self) -> Optional[str]:
        """Persist the current state, returning an error message instead of raising."""
        try:
            self.save()
        except OSError as e:
            logger.error("Failed to save progress to %s: %s", self.path, e)
            return f"Could not save progress to {self.path}: {e}"
        return None
