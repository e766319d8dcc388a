"""Challenge type definitions."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Grade(str, Enum):
    """Outcome of a graded attempt, best first."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    @property
    def rank(self) -> int:
        """Position in best-to-worst order; lower is better."""
        return GRADE_ORDER.index(self)

    def outranks(self, other: "Grade") -> bool:
        """Return True if this grade is strictly better than ``other``."""
        return self.rank < other.rank


GRADE_ORDER: tuple[Grade, ...] = (Grade.A, Grade.B, Grade.C, Grade.D, Grade.E, Grade.F)

# Grade names from the four-medal scheme used by early save files.
LEGACY_GRADES: dict[str, Grade] = {
    "Perfect": Grade.A,
    "Gold": Grade.B,
    "Silver": Grade.C,
    "Bronze": Grade.D,
}


class Category(str, Enum):
    """Difficulty tier that groups topics."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    LEGENDARY = "legendary"
    FREESTYLE = "freestyle"

    @classmethod
    def for_topic(cls, topic_id: int) -> "Category":
        """Map a topic id to its category."""
        if topic_id in (1, 2):
            return cls.BEGINNER
        if topic_id in (3, 4):
            return cls.INTERMEDIATE
        if 5 <= topic_id <= 7:
            return cls.ADVANCED
        if 100 <= topic_id <= 107:
            return cls.FREESTYLE
        return cls.LEGENDARY

    @property
    def label(self) -> str:
        return self.value.upper()

    @property
    def previous(self) -> Optional["Category"]:
        """The tier that must be cleared first, or None if always open."""
        return {
            Category.INTERMEDIATE: Category.BEGINNER,
            Category.ADVANCED: Category.INTERMEDIATE,
            Category.LEGENDARY: Category.ADVANCED,
        }.get(self)


CATEGORY_ORDER: tuple[Category, ...] = tuple(Category)


class BufferContent(BaseModel):
    """Text of a buffer."""

    model_config = ConfigDict(frozen=True)

    content: str


class Challenge(BaseModel):
    """A start/target buffer pair with grading metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    version: str
    title: str
    topic: str
    difficulty: int = Field(default=1)
    hint: str = Field(default="")
    detailed_hint: Optional[str] = Field(default=None)
    par_keystrokes: int = Field(default=0, ge=0, description="0 means no par (freestyle)")
    perfect_moves: Optional[list[str]] = Field(
        default=None, description="Reference solution used to derive par"
    )
    focused_actions: Optional[list[str]] = Field(default=None)
    start: BufferContent
    target: BufferContent

    def is_freestyle(self) -> bool:
        """Freestyle challenges have neither a par nor a reference solution."""
        return self.par_keystrokes == 0 and self.perfect_moves is None

    def score(self, keystrokes: int) -> Grade:
        """Grade a keystroke count against this challenge's par."""
        from .scoring import score

        return score(self.par_keystrokes, keystrokes)

    def threshold(self, grade: Grade) -> int:
        """Maximum keystroke count that still earns ``grade``."""
        from .scoring import threshold

        return threshold(self.par_keystrokes, grade)


class Topic(BaseModel):
    """A numbered group of challenges."""

    id: int
    name: str
    description: str
    challenges: list[Challenge] = Field(default_factory=list)

    @property
    def category(self) -> Category:
        return Category.for_topic(self.id)
