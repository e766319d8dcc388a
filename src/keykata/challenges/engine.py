"""Challenge execution engine."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..editor.harness import EditorSession, Telemetry
from ..editor.workspace import SessionFiles
from ..storage.persistence import ProgressStore
from .types import Challenge, Grade

logger = logging.getLogger(__name__)


class ChallengeResult:
    """Result of a challenge attempt."""

    def __init__(
        self,
        challenge: Challenge,
        telemetry: Telemetry,
        grade: Optional[Grade] = None,
        improved: bool = False,
        previous_best: Optional[int] = None,
        save_error: Optional[str] = None,
    ):
        self.challenge = challenge
        self.telemetry = telemetry
        self.grade = grade
        self.improved = improved
        self.previous_best = previous_best
        self.save_error = save_error
        self.timestamp = datetime.now()

    @property
    def success(self) -> bool:
        return self.telemetry.buffer_matches

    @property
    def freestyle(self) -> bool:
        return self.challenge.is_freestyle()


class ChallengeEngine:
    """Plays challenges in the editor and merges outcomes into progress."""

    def __init__(
        self,
        store: ProgressStore,
        workspace_dir: Path,
        editor_command: Optional[list[str]] = None,
    ):
        """Initialize the challenge engine.

        Args:
            store: Progress store updated after each attempt
            workspace_dir: Scratch directory for session files
            editor_command: Editor executable and leading arguments
        """
        self.store = store
        self.files = SessionFiles(workspace_dir)
        self.editor_command = editor_command

    def play(self, challenge: Challenge, number: int) -> ChallengeResult:
        """Run one attempt and record it if the buffer matches the target.

        Blocks for the whole editor session.

        Raises:
            SessionError: if the editor could not be run; nothing is recorded
        """
        session = EditorSession(challenge, number, self.files, self.editor_command)
        telemetry = session.run()
        return self.record(challenge, telemetry)

    def record(self, challenge: Challenge, telemetry: Telemetry) -> ChallengeResult:
        """Grade ``telemetry`` and merge it into the progress store."""
        state = self.store.state
        previous_best = state.best_keystrokes(challenge.id)

        if not telemetry.buffer_matches:
            logger.info("Challenge %s attempt did not match the target", challenge.id)
            return ChallengeResult(challenge, telemetry, previous_best=previous_best)

        grade: Optional[Grade] = None
        if challenge.is_freestyle():
            improved = state.record_freestyle_result(
                challenge.id,
                telemetry.keystrokes,
                telemetry.elapsed_secs,
                telemetry.keys,
                challenge.version,
            )
        else:
            grade = challenge.score(telemetry.keystrokes)
            improved = state.record_result(
                challenge.id,
                grade,
                telemetry.keystrokes,
                telemetry.elapsed_secs,
                telemetry.keys,
                challenge.version,
            )

        return ChallengeResult(
            challenge,
            telemetry,
            grade=grade,
            improved=improved,
            previous_best=previous_best,
            save_error=self.store.try_save(),
        )
