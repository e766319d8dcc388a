"""Best results, attempt history and stats for every challenge."""

from typing import Annotated, Iterable, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

from ..challenges.types import LEGACY_GRADES, Challenge, Grade

HISTORY_LIMIT = 10


def _decode_grade(value: object) -> object:
    """Map four-medal names from old save files onto current grades."""
    if isinstance(value, str) and value in LEGACY_GRADES:
        return LEGACY_GRADES[value]
    return value


StoredGrade = Annotated[Grade, BeforeValidator(_decode_grade)]


class AttemptRecord(BaseModel):
    """One completed attempt, kept in a bounded per-challenge leaderboard."""

    grade: StoredGrade = Field(validation_alias=AliasChoices("grade", "medal"))
    keystrokes: int = Field(ge=0)
    time_secs: int = Field(default=0, ge=0)
    keys: str = Field(default="")


class BestResult(BaseModel):
    """Authoritative best score for one challenge."""

    grade: StoredGrade = Field(validation_alias=AliasChoices("grade", "medal"))
    keystrokes: int = Field(ge=0)
    time_secs: int = Field(default=0, ge=0)
    version: str = Field(default="", description="Challenge version it was earned on")
    stale: bool = Field(default=False)


class Stats(BaseModel):
    """Totals across every attempt."""

    total_keystrokes: int = Field(default=0, ge=0)
    challenges_attempted: int = Field(default=0, ge=0)


class GameState(BaseModel):
    """Aggregate progress for one player.

    One instance is live per process. It is loaded at start-up, mutated after
    each completed attempt and saved after every mutation.
    """

    challenges: dict[str, BestResult] = Field(default_factory=dict)
    stats: Stats = Field(default_factory=Stats)
    history: dict[str, list[AttemptRecord]] = Field(default_factory=dict)

    def record_result(
        self,
        challenge_id: str,
        grade: Grade,
        keystrokes: int,
        time_secs: int,
        keys: str,
        version: str,
    ) -> bool:
        """Record a graded attempt.

        The best result is replaced when there is none yet, when it is stale,
        when ``grade`` outranks it, or on an equal grade with fewer keystrokes.

        Returns:
            True if the attempt became the new best result
        """
        best = self.challenges.get(challenge_id)
        improved = (
            best is None
            or best.stale
            or grade.outranks(best.grade)
            or (grade == best.grade and keystrokes < best.keystrokes)
        )
        self._apply(challenge_id, grade, keystrokes, time_secs, keys, version, improved)
        return improved

    def record_freestyle_result(
        self,
        challenge_id: str,
        keystrokes: int,
        time_secs: int,
        keys: str,
        version: str,
    ) -> bool:
        """Record a freestyle attempt; only fewer keystrokes count as better.

        The stored grade is a placeholder F and is never shown for freestyle
        challenges.
        """
        best = self.challenges.get(challenge_id)
        improved = best is None or best.stale or keystrokes < best.keystrokes
        self._apply(challenge_id, Grade.F, keystrokes, time_secs, keys, version, improved)
        return improved

    def _apply(
        self,
        challenge_id: str,
        grade: Grade,
        keystrokes: int,
        time_secs: int,
        keys: str,
        version: str,
        improved: bool,
    ) -> None:
        if improved:
            previous = self.challenges.get(challenge_id)
            if previous is not None and previous.stale:
                # Attempts on the old content are not comparable any more
                self.history.pop(challenge_id, None)
            self.challenges[challenge_id] = BestResult(
                grade=grade,
                keystrokes=keystrokes,
                time_secs=time_secs,
                version=version,
                stale=False,
            )

        self.stats.total_keystrokes += keystrokes
        self.stats.challenges_attempted += 1

        history = self.history.setdefault(challenge_id, [])
        history.append(
            AttemptRecord(grade=grade, keystrokes=keystrokes, time_secs=time_secs, keys=keys)
        )
        history.sort(key=lambda attempt: attempt.keystrokes)
        del history[HISTORY_LIMIT:]

    def mark_stale(self, challenges: Iterable[Challenge]) -> int:
        """Flag best results earned on an older version of a current challenge.

        Results for challenges that no longer exist are left alone.

        Returns:
            Number of results newly marked stale
        """
        versions = {challenge.id: challenge.version for challenge in challenges}
        marked = 0
        for challenge_id, best in self.challenges.items():
            current = versions.get(challenge_id)
            if current is not None and best.version != current and not best.stale:
                best.stale = True
                marked += 1
        return marked

    def best_grade(self, challenge_id: str) -> Optional[Grade]:
        best = self.challenges.get(challenge_id)
        return best.grade if best else None

    def best_keystrokes(self, challenge_id: str) -> Optional[int]:
        best = self.challenges.get(challenge_id)
        return best.keystrokes if best else None

    def has_result(self, challenge_id: str) -> bool:
        return challenge_id in self.challenges

    def is_stale(self, challenge_id: str) -> bool:
        best = self.challenges.get(challenge_id)
        return best is not None and best.stale

    def stale_count(self) -> int:
        return sum(1 for best in self.challenges.values() if best.stale)

    def history_for(self, challenge_id: str) -> list[AttemptRecord]:
        """Attempts for a challenge, fewest keystrokes first."""
        return list(self.history.get(challenge_id, []))
