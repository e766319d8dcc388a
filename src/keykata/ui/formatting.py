"""Plain-text helpers shared by the screens."""

from typing import Optional

from ..challenges.scoring import thresholds
from ..challenges.types import Challenge, Grade, Topic
from ..errors import SessionError
from ..storage.state import GameState


def format_time(seconds: int) -> str:
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def badge(challenge: Challenge, state: GameState) -> str:
    """Best grade, or best keystrokes for freestyle, in brackets."""
    if challenge.is_freestyle():
        best = state.best_keystrokes(challenge.id)
        return f"[{best}]" if best is not None else "[-]"
    grade = state.best_grade(challenge.id)
    return f"[{grade.value}]" if grade else "[-]"


def challenge_line(challenge: Challenge, number: int, state: GameState) -> str:
    line = f"#{number:03d} {badge(challenge, state)} {challenge.title}"
    if state.is_stale(challenge.id):
        line += " *"
    return line


def threshold_line(challenge: Challenge) -> str:
    shown = thresholds(challenge.par_keystrokes)
    return "  ".join(f"{grade.value}<={shown[grade]}" for grade in shown if grade is not Grade.F)


def challenge_detail(challenge: Challenge, state: GameState) -> str:
    """Par, thresholds and top attempts for the detail panel."""
    lines = [challenge.title, ""]
    if challenge.focused_actions:
        lines.append("Skills: " + ", ".join(challenge.focused_actions))
    if challenge.is_freestyle():
        best = state.best_keystrokes(challenge.id)
        lines.append(f"Personal best: {best} keystrokes" if best is not None else "Personal best: N/A")
    else:
        lines.append(f"Par: {challenge.par_keystrokes} keystrokes")
        lines.append(threshold_line(challenge))
    if state.is_stale(challenge.id):
        lines.append("* Challenge changed since your best score; replay to update it")

    history = state.history_for(challenge.id)
    if history:
        lines += ["", "Top attempts:"]
        for i, attempt in enumerate(history[:3], start=1):
            label = "" if challenge.is_freestyle() else f"[{attempt.grade.value}] "
            lines.append(
                f"  {i}. {label}{attempt.keystrokes} keys | {format_time(attempt.time_secs)} | {attempt.keys}"
            )
    return "\n".join(lines)


def topic_summary(topic: Topic, state: GameState) -> str:
    completed = sum(1 for c in topic.challenges if state.has_result(c.id))
    line = f"{topic.name} ({completed}/{len(topic.challenges)})"
    if any(state.is_stale(c.id) for c in topic.challenges):
        line += " *"
    return line


def outcome_title(grade: Optional[Grade], matched: bool, freestyle: bool) -> str:
    if not matched:
        return "FAILED"
    if freestyle:
        return "COMPLETED"
    return f"GRADE {grade.value}" if grade else "COMPLETED"


def session_failure(error: SessionError) -> str:
    """Notification text for a failed session, with any partial telemetry."""
    message = str(error)
    telemetry = error.telemetry
    if telemetry is None:
        return message
    matched = "matched" if telemetry.buffer_matches else "did not match"
    return (
        f"{message}\n"
        f"{telemetry.keystrokes} keys in {format_time(telemetry.elapsed_secs)}, "
        f"buffer {matched} the target (not recorded)"
    )
