"""Modal shown after each attempt."""

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from ...challenges.engine import ChallengeResult
from ..formatting import format_time, outcome_title


class ResultScreen(ModalScreen[bool]):
    """Shows the outcome of an attempt; dismisses with True to retry."""

    CSS = """
    ResultScreen {
        align: center middle;
    }

    #result-box {
        width: 50;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $surface;
    }
    """

    def __init__(self, result: ChallengeResult):
        super().__init__()
        self.outcome = result

    def compose(self) -> ComposeResult:
        with Vertical(id="result-box"):
            yield Static(self._summary(), markup=False)

    def _summary(self) -> str:
        result = self.outcome
        telemetry = result.telemetry
        challenge = result.challenge
        lines = [outcome_title(result.grade, result.success, result.freestyle), ""]

        time = format_time(telemetry.elapsed_secs)
        if result.freestyle:
            lines.append(f"{telemetry.keystrokes} keys | {time}")
            if result.success and result.previous_best is not None:
                if result.improved:
                    lines.append(f"New personal best (was {result.previous_best})")
                else:
                    lines.append(f"Personal best: {result.previous_best}")
        else:
            lines.append(f"{telemetry.keystrokes} keys (par {challenge.par_keystrokes}) | {time}")
            if result.success and result.improved:
                lines.append("New best result")
        if not result.success:
            lines.append("The buffer does not match the target")
        if not telemetry.results_found:
            lines.append("No keystroke data was recorded")

        lines += ["", "r: retry | any other key: back"]
        return "\n".join(lines)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.dismiss(event.key == "r")
