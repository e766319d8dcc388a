import sys
import textwrap
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from keykata.challenges.types import BufferContent, Challenge  # noqa: E402

FAKE_EDITOR = textwrap.dedent(
    """
    import json
    import os
    import sys
    from pathlib import Path

    if "--version" in sys.argv:
        sys.exit(0)

    buffer = Path(sys.argv[-1])
    (buffer.parent / "argv.json").write_text(json.dumps(sys.argv[1:]))
    if "FAKE_EDITOR_CONTENT" in os.environ:
        buffer.write_text(os.environ["FAKE_EDITOR_CONTENT"])
    if "FAKE_EDITOR_RESULTS" in os.environ:
        (buffer.parent / "results").write_text(os.environ["FAKE_EDITOR_RESULTS"])
    sys.exit(int(os.environ.get("FAKE_EDITOR_EXIT", "0")))
    """
)


def make_challenge(**overrides) -> Challenge:
    data = {
        "id": "motion_001",
        "version": "1.0.0",
        "title": "Test Challenge",
        "topic": "motions",
        "difficulty": 1,
        "hint": "Use f to find",
        "detailed_hint": "Try 3fw",
        "par_keystrokes": 10,
        "start": BufferContent(content="hello world\n"),
        "target": BufferContent(content="hello rust\n"),
    }
    data.update(overrides)
    return Challenge(**data)


@pytest.fixture
def challenge() -> Challenge:
    return make_challenge()


@pytest.fixture
def freestyle_challenge() -> Challenge:
    return make_challenge(id="freestyle_001", title="Rename", par_keystrokes=0)


@pytest.fixture
def fake_editor(tmp_path: Path) -> list[str]:
    """Editor command that edits the buffer as told by FAKE_EDITOR_* env vars."""
    script = tmp_path / "fake_nvim.py"
    script.write_text(FAKE_EDITOR)
    return [sys.executable, str(script)]
