import json
from pathlib import Path

import pytest
from conftest import make_challenge

from keykata.challenges.types import BufferContent
from keykata.editor.harness import (
    EditorSession,
    SessionState,
    build_editor_args,
    ensure_editor,
    normalize,
    read_results,
    run_challenge,
)
from keykata.editor.script import build_preamble, build_session_script, escape_lua, session_limit
from keykata.editor.workspace import SessionFiles
from keykata.errors import EditorNotFoundError, SessionError


def test_normalize_trims_trailing_whitespace() -> None:
    assert normalize("hello   \nworld  \n") == "hello\nworld"


def test_normalize_ignores_final_newline_and_blank_lines() -> None:
    assert normalize("a  \nb\n") == normalize("a\nb")
    assert normalize("a\nb\n\n   \n") == "a\nb"


def test_normalize_keeps_interior_blank_lines_and_indentation() -> None:
    assert normalize("  a\n\n  b") == "  a\n\n  b"
    assert normalize("hello") != normalize("world")


@pytest.mark.parametrize("separator", ["\r", "\x0b", "\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
def test_normalize_splits_on_newline_only(separator: str) -> None:
    assert normalize(f"a{separator}b") != normalize("a\nb")


def test_normalize_trims_crlf_line_endings() -> None:
    assert normalize("a\r\nb\r\n") == "a\nb"


@pytest.mark.parametrize("text", ["", "\n\n", "a \n b \n\n", "x\t\ny  ", "one\r\ntwo\r\n"])
def test_normalize_is_idempotent(text: str) -> None:
    assert normalize(normalize(text)) == normalize(text)


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("42\n15\njf8cw3000", (42, 15, "jf8cw3000")),
        ("35\n", (35, 0, "")),
        ("35\n12\n", (35, 12, "")),
        ("junk\n7\nkeys", (0, 7, "keys")),
        ("", (0, 0, "")),
        ("-3\n4\n", (0, 4, "")),
        ("3\n1\nia\u2028b\x85c", (3, 1, "ia\u2028b\x85c")),
    ],
)
def test_read_results(tmp_path: Path, content: str, expected: tuple[int, int, str]) -> None:
    path = tmp_path / "results"
    path.write_text(content, encoding="utf-8")
    assert read_results(path) == expected


def test_read_results_missing_file(tmp_path: Path) -> None:
    assert read_results(tmp_path / "nope") == (0, 0, "")


def test_read_results_keeps_carriage_return_in_key_log(tmp_path: Path) -> None:
    path = tmp_path / "results"
    path.write_bytes("2\n1\na\rb".encode("utf-8"))
    assert read_results(path) == (2, 1, "a\rb")


def test_escape_lua() -> None:
    assert escape_lua("hello") == "hello"
    assert escape_lua("it's") == "it\\'s"
    assert escape_lua("a\\b") == "a\\\\b"
    assert escape_lua("line1\nline2") == "line1\\nline2"
    assert escape_lua("cr\rhere") == "cr\\rhere"


def test_preamble_injects_session_values(tmp_path: Path) -> None:
    challenge = make_challenge(title="Don't panic", hint="a\nb", detailed_hint=None)
    files = SessionFiles(tmp_path)
    preamble = build_preamble(challenge, 7, files)

    assert "KATA_NUMBER = 7" in preamble
    assert "KATA_TITLE = 'Don\\'t panic'" in preamble
    assert "KATA_HINT = 'a\\nb'" in preamble
    assert "KATA_DETAILED_HINT = ''" in preamble
    assert "KATA_PAR = 10" in preamble
    assert "KATA_THRESHOLDS = { A = 10, B = 14, C = 18, D = 24, E = 28 }" in preamble
    assert "KATA_LIMIT = 32" in preamble
    assert "KATA_FREESTYLE = false" in preamble
    assert f"KATA_RESULTS_PATH = '{files.results}'" in preamble
    assert f"KATA_TARGET_PATH = '{files.target}'" in preamble
    assert f"KATA_START_PATH = '{files.start}'" in preamble


def test_session_script_appends_runtime(tmp_path: Path, freestyle_challenge) -> None:
    script = build_session_script(freestyle_challenge, 1, SessionFiles(tmp_path))
    assert script.startswith("KATA_NUMBER = 1\n")
    assert "KATA_FREESTYLE = true" in script
    assert "_G.kata_stop" in script
    assert session_limit(freestyle_challenge) == 9999


def test_prepare_writes_buffers_and_clears_old_results(tmp_path: Path, challenge) -> None:
    files = SessionFiles(tmp_path / "ws")
    files.directory.mkdir()
    files.results.write_text("99\n99\nstale")

    files.prepare(challenge)

    assert not files.results.exists()
    assert files.buffer.read_text() == challenge.start.content
    assert files.start.read_text() == challenge.start.content
    assert files.target.read_text() == challenge.target.content


def test_editor_args_open_buffer_last(tmp_path: Path) -> None:
    files = SessionFiles(tmp_path / "with space")
    args = build_editor_args(["nvim"], files)
    assert args[0] == "nvim"
    assert args[-1] == str(files.buffer)
    assert any(arg.startswith("luafile ") and "with\\ space" in arg for arg in args)
    assert any("BufWritePost" in arg and "kata_stop" in arg for arg in args)
    assert any("diffthis" in arg and "readonly" in arg for arg in args)


def test_session_collects_matching_buffer(
    tmp_path: Path, challenge, fake_editor: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("FAKE_EDITOR_CONTENT", "hello rust   ")
    monkeypatch.setenv("FAKE_EDITOR_RESULTS", "9\n12\nwcwrust<Esc>")
    files = SessionFiles(tmp_path / "ws")
    session = EditorSession(challenge, 3, files, fake_editor)

    telemetry = session.run()

    assert session.state == SessionState.DONE
    assert telemetry.buffer_matches is True
    assert telemetry.keystrokes == 9
    assert telemetry.elapsed_secs == 12
    assert telemetry.keys == "wcwrust<Esc>"
    assert telemetry.results_found is True
    assert "KATA_NUMBER = 3" in files.script.read_text()
    argv = json.loads((files.directory / "argv.json").read_text())
    assert argv[-1] == str(files.buffer)


def test_session_without_results_degrades_to_zero(
    tmp_path: Path, challenge, fake_editor: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("FAKE_EDITOR_CONTENT", raising=False)
    monkeypatch.delenv("FAKE_EDITOR_RESULTS", raising=False)
    files = SessionFiles(tmp_path / "ws")
    files.directory.mkdir()
    files.results.write_text("1\n1\nfrom an older session")

    telemetry = run_challenge(challenge, 1, files.directory, fake_editor)

    assert telemetry.keystrokes == 0
    assert telemetry.elapsed_secs == 0
    assert telemetry.keys == ""
    assert telemetry.results_found is False
    assert telemetry.buffer_matches is False


def test_failed_exit_raises_with_partial_telemetry(
    tmp_path: Path, challenge, fake_editor: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("FAKE_EDITOR_CONTENT", "hello rust\n")
    monkeypatch.setenv("FAKE_EDITOR_RESULTS", "4\n")
    monkeypatch.setenv("FAKE_EDITOR_EXIT", "1")
    session = EditorSession(challenge, 1, SessionFiles(tmp_path / "ws"), fake_editor)

    with pytest.raises(SessionError) as info:
        session.run()

    assert session.state == SessionState.FAILED
    assert isinstance(info.value, OSError)
    assert info.value.telemetry is not None
    assert info.value.telemetry.keystrokes == 4
    assert info.value.telemetry.buffer_matches is True


def test_unlaunchable_editor_raises_session_error(tmp_path: Path, challenge) -> None:
    session = EditorSession(challenge, 1, SessionFiles(tmp_path / "ws"), [str(tmp_path / "no-such-editor")])
    with pytest.raises(SessionError) as info:
        session.run()
    assert info.value.telemetry is None
    assert session.state == SessionState.FAILED


def test_ensure_editor(tmp_path: Path, fake_editor: list[str]) -> None:
    ensure_editor(fake_editor)
    with pytest.raises(EditorNotFoundError):
        ensure_editor([str(tmp_path / "no-such-editor")])


def test_carriage_return_in_buffer_does_not_match_line_break(
    tmp_path: Path, fake_editor: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    challenge = make_challenge(target=BufferContent(content="hello\nrust\n"))
    monkeypatch.setenv("FAKE_EDITOR_CONTENT", "hello\rrust\n")
    monkeypatch.setenv("FAKE_EDITOR_RESULTS", "6\n2\nr<C-v><CR>")

    telemetry = run_challenge(challenge, 1, tmp_path / "ws", fake_editor)

    assert telemetry.buffer_matches is False
