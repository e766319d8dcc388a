"""Load challenge definitions from a directory of TOML files."""

import logging
import tomllib
from pathlib import Path
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from .scoring import count_keystrokes
from .types import Category, Challenge, Topic

logger = logging.getLogger(__name__)

# (topic id, directory, name, description)
TOPICS: list[tuple[int, str, str, str]] = [
    (1, "01_motions", "Advanced Motions", "f/t/;, %, [{, ]m, H/M/L, g;/g,"),
    (2, "02_text_objects", "Text Objects", 'ci", da(, vit, ciw, cip'),
    (3, "03_registers", "Registers", '"a-z, "0-9, "+, "., "_'),
    (4, "04_marks_jumps", "Marks & Jumps", "ma, `a, '', Ctrl-O/Ctrl-I"),
    (5, "05_macros", "Macros", "qa, @a, @@, recursive macros"),
    (6, "06_ex_commands", "Ex Commands", ":g, :s, :norm, ranges, :sort"),
    (7, "07_advanced_combos", "Advanced Combos", "Everything together"),
    (8, "08_legendary", "Legendary Combos", "The hardest graded challenges"),
]

FREESTYLE_TOPICS: list[tuple[int, str, str, str]] = [
    (100, "f01_refactoring", "Code Refactoring", "Rename, restructure, tidy"),
    (101, "f02_data_wrangling", "Data Wrangling", "CSV, JSON and tables"),
    (102, "f03_bug_fixing", "Bug Fixing", "Several bugs per file"),
    (103, "f04_pattern_power", "Pattern Power", "Repetitive edits at scale"),
    (104, "f05_format_alchemy", "Format Alchemy", "Convert between formats"),
    (105, "f06_legacy_cleanup", "Legacy Cleanup", "Modernize messy code"),
    (106, "f07_multi_edit", "Multi-Edit Mastery", "Edits in many places"),
    (107, "f08_grand", "Grand Challenges", "Long mixed-skill edits"),
]


def load_curriculum(challenges_dir: Path) -> list[Topic]:
    """Load every topic, graded tiers first.

    Topics whose directory is missing come back empty.
    """
    return [
        Topic(
            id=topic_id,
            name=name,
            description=description,
            challenges=load_challenges_from_dir(challenges_dir / dir_name),
        )
        for topic_id, dir_name, name, description in [*TOPICS, *FREESTYLE_TOPICS]
    ]


def load_challenges_from_dir(directory: Path) -> list[Challenge]:
    """Load the ``*.toml`` challenges in ``directory`` in file-name order.

    Files that cannot be read or validated are skipped with a warning.
    """
    if not directory.is_dir():
        return []

    challenges = []
    for path in sorted(directory.glob("*.toml")):
        challenge = load_challenge(path)
        if challenge is not None:
            challenges.append(challenge)
    return challenges


def load_challenge(path: Path) -> Optional[Challenge]:
    """Parse one challenge file, deriving par from ``perfect_moves``."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        challenge = Challenge.model_validate(data)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Failed to parse %s: %s", path, e)
        return None

    if challenge.perfect_moves is not None:
        par = sum(count_keystrokes(move) for move in challenge.perfect_moves)
        if par == 0:
            logger.warning("Skipping %s: perfect_moves has no keystrokes", path)
            return None
        challenge = challenge.model_copy(update={"par_keystrokes": par})
    return challenge


def all_challenges(topics: Iterable[Topic]) -> list[Challenge]:
    """Flatten topics into one list, preserving order."""
    return [challenge for topic in topics for challenge in topic.challenges]


def challenge_number(topics: list[Topic], topic_id: int, index: int) -> int:
    """Global 1-based display number of a challenge across all topics."""
    offset = sum(len(t.challenges) for t in topics if t.id < topic_id)
    return offset + index + 1


def is_category_unlocked(
    category: Category,
    topics: list[Topic],
    has_result: Callable[[str], bool],
    unlock_all: bool = False,
) -> bool:
    """A category opens once every challenge of the previous tier has a result.

    Args:
        category: Category to check
        topics: Full curriculum
        has_result: Predicate telling whether a challenge id has a best result
        unlock_all: Bypass gating entirely

    Returns:
        True if the category may be played
    """
    if unlock_all:
        return True
    previous = category.previous
    if previous is None:
        return True
    return all(
        has_result(challenge.id)
        for topic in topics
        if topic.category == previous
        for challenge in topic.challenges
    )
