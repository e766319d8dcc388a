"""Neovim session harness."""

from .harness import EditorSession, SessionState, Telemetry, ensure_editor, normalize, run_challenge
from .workspace import SessionFiles

__all__ = [
    "EditorSession",
    "SessionFiles",
    "SessionState",
    "Telemetry",
    "ensure_editor",
    "normalize",
    "run_challenge",
]
