"""Keystroke counting and par-based grading.

Thresholds use integer floor division (``par * n // 10``) rather than floats
so the numbers shown in the editor and in the menus are reproducible.
"""

from .types import GRADE_ORDER, Grade

# Tenths of par allowed for each grade. F is never scored by threshold; its
# value is the limit at which a running session gives up.
GRADE_TENTHS: dict[Grade, int] = {
    Grade.A: 10,
    Grade.B: 14,
    Grade.C: 18,
    Grade.D: 24,
    Grade.E: 28,
    Grade.F: 32,
}


def count_keystrokes(notation: str) -> int:
    """Count key presses in Vim key notation.

    Plain characters count as one each. A ``<...>`` token such as ``<Esc>``
    or ``<C-r>`` counts as one regardless of its length; an unterminated
    ``<`` swallows the rest of the string as a single token. A literal ``<``
    in typed text has to be written as ``<lt>``.

    Examples:
        >>> count_keystrokes("jf8cw3000<Esc>")
        10
        >>> count_keystrokes("<C-r>a")
        2
    """
    count = 0
    i = 0
    length = len(notation)
    while i < length:
        if notation[i] == "<":
            close = notation.find(">", i + 1)
            i = length if close == -1 else close + 1
        else:
            i += 1
        count += 1
    return count


def threshold(par: int, grade: Grade) -> int:
    """Return the highest keystroke count that still earns ``grade``."""
    return par * GRADE_TENTHS[grade] // 10


def score(par: int, keystrokes: int) -> Grade:
    """Grade ``keystrokes`` against ``par``.

    Always returns a grade; anything above the E threshold is F. Ties go to
    the better grade.

    Raises:
        ValueError: if ``par`` is not positive (freestyle challenges are not
            graded).
    """
    if par <= 0:
        raise ValueError("Cannot grade a challenge without a par")
    for grade in GRADE_ORDER[:-1]:
        if keystrokes <= threshold(par, grade):
            return grade
    return Grade.F


def thresholds(par: int) -> dict[Grade, int]:
    """All grade thresholds for ``par``, for display."""
    return {grade: threshold(par, grade) for grade in GRADE_ORDER}
