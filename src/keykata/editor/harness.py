"""Run one challenge inside Neovim and collect what happened."""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..challenges.types import Challenge
from ..errors import EditorNotFoundError, SessionError
from .script import build_session_script
from .workspace import SessionFiles

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of an editor session."""

    PREPARING = "preparing"
    RUNNING = "running"
    COLLECTING = "collecting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Telemetry:
    """What one editor session produced."""

    keystrokes: int
    elapsed_secs: int
    keys: str
    buffer_matches: bool
    results_found: bool = True


def _read_raw(path: Path) -> str:
    """Read a file without newline translation, so a lone ``\\r`` stays put."""
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def normalize(text: str) -> str:
    """Trim trailing whitespace on each line and drop trailing blank lines.

    Only ``\\n`` separates lines; other control characters are content.
    """
    return "\n".join(line.rstrip() for line in text.split("\n")).rstrip("\n")


def read_results(path: Path) -> tuple[int, int, str]:
    """Read (keystrokes, elapsed seconds, key log) from a results file.

    Missing or malformed lines fall back to 0 / empty; a missing file reads
    as all zeros.
    """
    try:
        contents = _read_raw(path)
    except (OSError, UnicodeDecodeError):
        return 0, 0, ""

    lines = contents.split("\n")

    def number(index: int) -> int:
        try:
            return max(0, int(lines[index].strip()))
        except (IndexError, ValueError):
            return 0

    keys = lines[2].rstrip("\r") if len(lines) > 2 else ""
    return number(0), number(1), keys


def ensure_editor(command: list[str]) -> None:
    """Check that the editor can be executed.

    Raises:
        EditorNotFoundError: if the binary is missing or cannot be run
    """
    try:
        subprocess.run(
            [*command, "--version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        raise EditorNotFoundError(command) from e


def _vim_path(path: Path) -> str:
    """Escape a path for use inside an Ex command."""
    return str(path).replace("\\", "\\\\").replace(" ", "\\ ")


def build_editor_args(command: list[str], files: SessionFiles) -> list[str]:
    """Command line for a session: target diffed on top, buffer below."""
    target = _vim_path(files.target)
    return [
        *command,
        # No swap, undo or backup files in the scratch directory
        "--cmd",
        "set noswapfile noundofile nobackup nowritebackup",
        "-c",
        (
            f"split {target} | setlocal readonly nomodifiable buftype=nofile | "
            "let &l:winbar = '  [TARGET]' | "
            "diffthis | set diffopt+=context:99999 | setlocal wrap nocursorbind | "
            "wincmd j | diffthis | setlocal wrap nocursorbind"
        ),
        "-c",
        f"luafile {_vim_path(files.script)}",
        # Saving the buffer ends the session
        "-c",
        f"autocmd BufWritePost {_vim_path(files.buffer)} lua _G.kata_stop(); vim.cmd('qall!')",
        str(files.buffer),
    ]


class EditorSession:
    """One Preparing -> Running -> Collecting cycle for a challenge.

    ``run`` blocks until the editor exits. Retrying a challenge means
    creating a new session.
    """

    def __init__(
        self,
        challenge: Challenge,
        number: int,
        files: SessionFiles,
        editor_command: Optional[list[str]] = None,
    ):
        """Initialize the session.

        Args:
            challenge: Challenge to play
            number: Global display number shown in the editor
            files: Workspace file layout
            editor_command: Editor executable and leading arguments
        """
        self.challenge = challenge
        self.number = number
        self.files = files
        self.editor_command = editor_command or ["nvim"]
        self.state = SessionState.PREPARING
        self.returncode: Optional[int] = None

    def run(self) -> Telemetry:
        """Play the challenge and return the collected telemetry.

        Raises:
            SessionError: if the editor cannot be started, exits with a
                failure status, or the workspace cannot be used
        """
        try:
            self._prepare()
            self._launch()
            telemetry = self._collect()
        except SessionError:
            self.state = SessionState.FAILED
            raise

        if self.returncode != 0:
            self.state = SessionState.FAILED
            raise SessionError(
                f"Editor exited with status {self.returncode}", telemetry=telemetry
            )

        self.state = SessionState.DONE
        return telemetry

    def _prepare(self) -> None:
        self.state = SessionState.PREPARING
        try:
            self.files.prepare(self.challenge)
            self.files.script.write_text(
                build_session_script(self.challenge, self.number, self.files),
                encoding="utf-8",
            )
        except OSError as e:
            raise SessionError(f"Could not prepare session workspace: {e}") from e

    def _launch(self) -> None:
        self.state = SessionState.RUNNING
        args = build_editor_args(self.editor_command, self.files)
        logger.info("Starting editor for challenge %s", self.challenge.id)
        logger.debug("Editor command: %s", args)
        try:
            completed = subprocess.run(args, check=False)
        except OSError as e:
            raise SessionError(f"Could not start editor: {e}") from e
        self.returncode = completed.returncode
        logger.info("Editor exited with status %s", self.returncode)

    def _collect(self) -> Telemetry:
        self.state = SessionState.COLLECTING
        try:
            final = _read_raw(self.files.buffer)
        except (OSError, UnicodeDecodeError) as e:
            raise SessionError(f"Could not read the edited buffer: {e}") from e

        results_found = self.files.results.exists()
        keystrokes, elapsed, keys = read_results(self.files.results)
        if not results_found:
            logger.warning("No results file after session for %s", self.challenge.id)

        return Telemetry(
            keystrokes=keystrokes,
            elapsed_secs=elapsed,
            keys=keys,
            buffer_matches=normalize(final) == normalize(self.challenge.target.content),
            results_found=results_found,
        )


def run_challenge(
    challenge: Challenge,
    number: int,
    workspace_dir: Path,
    editor_command: Optional[list[str]] = None,
) -> Telemetry:
    """Run one editor session for ``challenge`` in ``workspace_dir``."""
    session = EditorSession(challenge, number, SessionFiles(workspace_dir), editor_command)
    return session.run()
