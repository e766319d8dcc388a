"""Entry point for keykata."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .challenges.curriculum import all_challenges, load_curriculum
from .config import Settings, load_settings
from .editor.harness import ensure_editor
from .errors import EditorNotFoundError, SaveError
from .storage.persistence import ProgressStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keykata",
        description="Transform buffers in Neovim in as few keystrokes as possible.",
    )
    parser.add_argument(
        "--unlock-all",
        action="store_true",
        help="open every tier without completing the previous one",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(settings: Settings) -> logging.Handler:
    """Log to a file in the data directory and, until the UI starts, to stderr.

    Returns:
        The stderr handler, to be removed once the terminal is taken over
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console)

    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_path, encoding="utf-8")
    except OSError as e:
        logger.warning("Logging to file disabled: %s", e)
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
    return console


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run keykata."""
    args = build_parser().parse_args(argv)
    settings = load_settings(unlock_all=args.unlock_all)
    console = configure_logging(settings)

    try:
        ensure_editor(settings.editor_command)
    except EditorNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    topics = load_curriculum(settings.challenges_dir)
    challenges = all_challenges(topics)
    if not challenges:
        print("No challenges found.", file=sys.stderr)
        print(f"Looked in: {settings.challenges_dir}", file=sys.stderr)
        return 1

    try:
        store = ProgressStore.open(settings.save_path)
    except SaveError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Fix or move the file away to start over.", file=sys.stderr)
        return 1

    marked = store.state.mark_stale(challenges)
    if marked:
        logger.info("%d saved result(s) are for changed challenges", marked)

    from .ui.app import KataApp

    logging.getLogger().removeHandler(console)
    try:
        KataApp(settings, store, topics).run()
    finally:
        error = store.try_save()
        if error:
            print(f"Error: {error}", file=sys.stderr)
    return 1 if error else 0


if __name__ == "__main__":
    sys.exit(main())
