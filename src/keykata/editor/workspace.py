"""Scratch files shared between keykata and one editor session."""

from dataclasses import dataclass
from pathlib import Path

from ..challenges.types import Challenge


@dataclass(frozen=True)
class SessionFiles:
    """Fixed file layout inside the session workspace directory.

    Every session reuses the same names, so ``prepare`` removes the results
    file of any earlier session before a new one starts.
    """

    directory: Path

    @property
    def buffer(self) -> Path:
        """Editable buffer, seeded with the start content."""
        return self.directory / "challenge_buffer"

    @property
    def target(self) -> Path:
        """Read-only copy of the target content."""
        return self.directory / "challenge_target"

    @property
    def start(self) -> Path:
        """Pristine copy of the start content."""
        return self.directory / "challenge_start"

    @property
    def script(self) -> Path:
        return self.directory / "runtime.lua"

    @property
    def results(self) -> Path:
        return self.directory / "results"

    def prepare(self, challenge: Challenge) -> None:
        """Write the buffers for ``challenge`` and clear stale results.

        Raises:
            OSError: if the workspace cannot be written
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        self.buffer.write_text(challenge.start.content, encoding="utf-8")
        self.target.write_text(challenge.target.content, encoding="utf-8")
        self.start.write_text(challenge.start.content, encoding="utf-8")
        self.results.unlink(missing_ok=True)
