"""Hub screen listing categories and topics."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Label, ListItem, ListView, Static

from ...challenges.curriculum import all_challenges, is_category_unlocked
from ...challenges.types import Topic
from ..formatting import topic_summary


class TopicItem(ListItem):
    """List entry for one topic."""

    def __init__(self, topic: Topic):
        super().__init__(Label("", markup=False))
        self.topic = topic

    def refresh_label(self, text: str) -> None:
        self.query_one(Label).update(text)


class HubScreen(Screen):
    """Topic browser with progression gating."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("l", "open", "Open", show=False),
    ]

    def compose(self) -> ComposeResult:
        """Compose the hub screen."""
        with Container(id="main-content"):
            yield Static("keykata", classes="title")
            yield Static("", id="hub-stats", classes="subtitle", markup=False)
            yield ListView(
                *[TopicItem(topic) for topic in self.app.topics if topic.challenges],
                id="topic-list",
            )

    def on_mount(self) -> None:
        self._refresh()

    def on_screen_resume(self) -> None:
        self._refresh()

    def _is_unlocked(self, topic: Topic) -> bool:
        return is_category_unlocked(
            topic.category,
            self.app.topics,
            self.app.state.has_result,
            self.app.settings.unlock_all,
        )

    def _refresh(self) -> None:
        """Redraw the header stats and every topic label."""
        state = self.app.state
        challenges = all_challenges(self.app.topics)
        completed = sum(1 for c in challenges if state.has_result(c.id))
        stats = (
            f"Completed {completed}/{len(challenges)} | "
            f"Attempts {state.stats.challenges_attempted} | "
            f"Keystrokes {state.stats.total_keystrokes}"
        )
        stale = state.stale_count()
        if stale:
            stats += f" | Warning: {stale} score(s) outdated (*)"
        self.query_one("#hub-stats", Static).update(stats)

        for item in self.query(TopicItem):
            label = f"{item.topic.category.label:<13} {topic_summary(item.topic, state)}"
            if not self._is_unlocked(item.topic):
                label += " [LOCKED]"
            item.refresh_label(label)

    def action_cursor_down(self) -> None:
        self.query_one(ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one(ListView).action_cursor_up()

    def action_open(self) -> None:
        self.query_one(ListView).action_select_cursor()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Open the picker for an unlocked topic."""
        if not isinstance(event.item, TopicItem):
            return
        topic = event.item.topic
        if not self._is_unlocked(topic):
            previous = topic.category.previous
            self.app.notify(
                f"Finish every {previous.label.lower()} challenge first",
                title="Locked",
                severity="warning",
            )
            return

        from .picker import PickerScreen

        self.app.push_screen(PickerScreen(topic))
