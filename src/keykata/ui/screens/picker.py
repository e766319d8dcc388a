"""Challenge picker for one topic."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Label, ListItem, ListView, Static

from ...challenges.curriculum import challenge_number
from ...challenges.types import Challenge, Topic
from ..formatting import challenge_detail, challenge_line


class ChallengeItem(ListItem):
    """List entry for one challenge."""

    def __init__(self, challenge: Challenge, number: int):
        super().__init__(Label("", markup=False))
        self.challenge = challenge
        self.number = number


class PickerScreen(Screen):
    """Lists a topic's challenges with best results and details."""

    CSS = """
    #picker-body {
        height: 1fr;
    }

    #challenge-list {
        width: 1fr;
        border: solid $primary;
    }

    #challenge-detail {
        width: 1fr;
        padding: 0 1;
        border: solid $primary;
    }
    """

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("l", "play", "l:Play", show=True),
        Binding("h", "back", "h:Back", show=True),
    ]

    def __init__(self, topic: Topic):
        super().__init__()
        self.topic = topic

    def compose(self) -> ComposeResult:
        """Compose the picker screen."""
        items = [
            ChallengeItem(challenge, challenge_number(self.app.topics, self.topic.id, i))
            for i, challenge in enumerate(self.topic.challenges)
        ]
        with Container(id="main-content"):
            yield Static(
                f"{self.topic.category.label}  {self.topic.name}",
                classes="title",
                markup=False,
            )
            yield Static(self.topic.description, classes="subtitle", markup=False)
            with Horizontal(id="picker-body"):
                yield ListView(*items, id="challenge-list")
                yield Static("", id="challenge-detail", markup=False)

    def on_mount(self) -> None:
        self._refresh()

    def on_screen_resume(self) -> None:
        self._refresh()

    def _refresh(self) -> None:
        state = self.app.state
        for item in self.query(ChallengeItem):
            item.query_one(Label).update(challenge_line(item.challenge, item.number, state))
        self._show_detail(self.query_one(ListView).highlighted_child)

    def _show_detail(self, item: object) -> None:
        detail = self.query_one("#challenge-detail", Static)
        if isinstance(item, ChallengeItem):
            detail.update(challenge_detail(item.challenge, self.app.state))
        else:
            detail.update("")

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._show_detail(event.item)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ChallengeItem):
            self.app.play(event.item.challenge, event.item.number)

    def action_cursor_down(self) -> None:
        self.query_one(ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one(ListView).action_cursor_up()

    def action_play(self) -> None:
        self.query_one(ListView).action_select_cursor()

    def action_back(self) -> None:
        self.app.pop_screen()
