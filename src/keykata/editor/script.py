"""Generate the Lua script that drives a Neovim challenge session.

The script is an injected preamble of globals followed by the bundled
``runtime.lua`` template. The preamble is the whole interface between the
two sides, so every value is written out explicitly.
"""

from pathlib import Path

from ..challenges.scoring import threshold
from ..challenges.types import Challenge, Grade
from .workspace import SessionFiles

RUNTIME_TEMPLATE = Path(__file__).with_name("runtime.lua")

# Keystroke ceiling for freestyle sessions, which never stop on their own count.
FREESTYLE_LIMIT = 9999


def escape_lua(value: str) -> str:
    """Escape a string for a single-quoted Lua literal."""
    return (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def _lua_str(value: str) -> str:
    return f"'{escape_lua(value)}'"


def _lua_bool(value: bool) -> str:
    return "true" if value else "false"


def session_limit(challenge: Challenge) -> int:
    """Keystroke count at which a graded session ends by itself."""
    if challenge.is_freestyle():
        return FREESTYLE_LIMIT
    return threshold(challenge.par_keystrokes, Grade.F)


def build_preamble(challenge: Challenge, number: int, files: SessionFiles) -> str:
    """Render the global definitions the runtime template expects."""
    par = challenge.par_keystrokes
    thresholds = ", ".join(
        f"{grade.value} = {threshold(par, grade)}"
        for grade in (Grade.A, Grade.B, Grade.C, Grade.D, Grade.E)
    )
    lines = [
        f"KATA_NUMBER = {number}",
        f"KATA_TITLE = {_lua_str(challenge.title)}",
        f"KATA_PAR = {par}",
        f"KATA_HINT = {_lua_str(challenge.hint)}",
        f"KATA_DETAILED_HINT = {_lua_str(challenge.detailed_hint or '')}",
        f"KATA_THRESHOLDS = {{ {thresholds} }}",
        f"KATA_LIMIT = {session_limit(challenge)}",
        f"KATA_FREESTYLE = {_lua_bool(challenge.is_freestyle())}",
        f"KATA_RESULTS_PATH = {_lua_str(str(files.results))}",
        f"KATA_TARGET_PATH = {_lua_str(str(files.target))}",
        f"KATA_START_PATH = {_lua_str(str(files.start))}",
    ]
    return "\n".join(lines) + "\n"


def build_session_script(challenge: Challenge, number: int, files: SessionFiles) -> str:
    """Full script text: preamble, blank line, runtime template."""
    template = RUNTIME_TEMPLATE.read_text(encoding="utf-8")
    return f"{build_preamble(challenge, number, files)}\n{template}"
