"""
Labels for clarity.
"""

from dataclasses import dataclass
from typing import Literal, NamedTuple, Sequence

Code = str  # 4 distinct digits, e.g. "0123" (never an int: leading zeros matter)
Difficulty = Literal["easy", "medium", "hard"]
MatchMode = Literal["practice", "ai"]
MatchStatus = Literal["in_progress", "won", "lost"]

DIFFICULTIES = ("easy", "medium", "hard")


class Score(NamedTuple):
    dead: int
    wounded: int


@dataclass(frozen=True)
class GuessRecord:
    """One turn taken against a fixed, unknown secret."""
    guess: Code
    dead: int
    wounded: int

    @property
    def score(self) -> Score:
        return Score(self.dead, self.wounded)


History = Sequence[GuessRecord]
