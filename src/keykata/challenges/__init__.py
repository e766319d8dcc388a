"""Challenge definitions, curriculum loading and grading."""

from .curriculum import is_category_unlocked, load_curriculum
from .scoring import count_keystrokes, score, threshold
from .types import Category, Challenge, Grade, Topic

__all__ = [
    "Category",
    "Challenge",
    "Grade",
    "Topic",
    "count_keystrokes",
    "is_category_unlocked",
    "load_curriculum",
    "score",
    "threshold",
]
