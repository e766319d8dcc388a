"""Main Textual application."""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..challenges.engine import ChallengeEngine
from ..challenges.types import Challenge, Topic
from ..config import Settings
from ..errors import SessionError
from ..storage.persistence import ProgressStore
from ..storage.state import GameState
from .formatting import session_failure
from .screens.hub import HubScreen
from .screens.result import ResultScreen

logger = logging.getLogger(__name__)


class KataApp(App):
    """Menu front end around the editor sessions."""

    TITLE = "keykata"
    SUB_TITLE = "Edit the buffer into the target in as few keys as you can"

    CSS = """
    Screen {
        background: $surface;
    }

    #main-content {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    .title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    .subtitle {
        color: $text-muted;
        margin-bottom: 1;
    }

    ListView > ListItem.--highlight {
        background: $primary-darken-2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "q:Quit", show=True),
        Binding("escape", "go_back", "Esc:Back", show=False),
        Binding("?", "help", "?:Help", show=True),
    ]

    def __init__(self, settings: Settings, store: ProgressStore, topics: list[Topic]):
        super().__init__()
        self.settings = settings
        self.store = store
        self.topics = topics
        self.engine = ChallengeEngine(store, settings.workspace_dir, settings.editor_command)

    @property
    def state(self) -> GameState:
        return self.store.state

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(HubScreen())

    def play(self, challenge: Challenge, number: int) -> None:
        """Hand the terminal to the editor for one attempt, then show the result."""
        try:
            with self.suspend():
                result = self.engine.play(challenge, number)
        except SessionError as e:
            logger.warning("Session for %s failed: %s", challenge.id, e)
            self.notify(session_failure(e), title="Session failed", severity="error")
            return

        if result.save_error:
            self.notify(result.save_error, title="Save failed", severity="error")

        def retry(again: Optional[bool]) -> None:
            if again:
                self.play(challenge, number)

        self.push_screen(ResultScreen(result), retry)

    def action_go_back(self) -> None:
        """Go back to the previous screen."""
        if len(self.screen_stack) > 2:
            self.pop_screen()

    def action_help(self) -> None:
        """Show help."""
        self.notify(
            "Navigation: j/k=Down/Up, l/Enter=Open or play, h/Esc=Back\n"
            "In the editor: F1 cycles hints, :w submits, :q! abandons\n"
            "Other: q=Quit",
            title="Keys",
            timeout=10,
        )
