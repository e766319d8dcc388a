"""Exception types shared across keykata."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .editor.harness import Telemetry


class KataError(Exception):
    """Base class for keykata errors."""


class EditorNotFoundError(KataError):
    """The external editor binary could not be executed."""

    def __init__(self, command: list[str]):
        self.command = command
        super().__init__(
            f"Editor '{' '.join(command)}' is required but could not be started. "
            "Install neovim or set KEYKATA_EDITOR."
        )


class SessionError(KataError, OSError):
    """An editor session could not be launched or exited with a failure status.

    Recoverable: the caller may retry the challenge. When the editor ran but
    failed, whatever telemetry was collected is attached so the player can
    see it; it is never recorded.
    """

    def __init__(self, message: str, telemetry: Optional["Telemetry"] = None):
        super().__init__(message)
        self.telemetry = telemetry


class SaveError(KataError):
    """The progress file exists but could not be read or decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load save file '{path}': {reason}")
