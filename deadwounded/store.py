"""
In-memory match store
Holds matches in memory and plays the AI's turns.

A match is either:
- practice: the player guesses a random secret, nobody guesses back
- ai: the player also commits a secret, and after every player guess the AI
  answers with a guess of its own (scored here, never by the solver)
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from time import time
from typing import Dict, List, Optional
from uuid import uuid4

from .engine import is_win, score, validate_code
from .solver import next_guess
from .types import DIFFICULTIES, Code, Difficulty, GuessRecord, MatchMode, MatchStatus

logger = logging.getLogger(__name__)


class MatchError(ValueError):
    pass


class RepeatedGuessError(MatchError):
    def __init__(self, guess: Code):
        self.guess = guess
        super().__init__(f"You already guessed {guess}!")


class MatchFinishedError(MatchError):
    def __init__(self, status: MatchStatus):
        self.status = status
        super().__init__(f"Match {status}. No more guesses allowed.")


@dataclass
class Match:
    id: str
    secret: Code                        # what the player is trying to find
    mode: MatchMode = "practice"
    difficulty: Optional[Difficulty] = None
    player_secret: Optional[Code] = None  # what the AI is trying to find
    status: MatchStatus = "in_progress"
    history: List[GuessRecord] = field(default_factory=list)
    ai_history: List[GuessRecord] = field(default_factory=list)
    created_at: float = field(default_factory=time)
    updated_at: float = field(default_factory=time)
    # Serializes turns of this match; the store lock only guards the table and stats
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @property
    def stats_key(self) -> str:
        return self.difficulty if self.mode == "ai" else "practice"


def _mode_counter() -> Dict[str, int]:
    return {"practice": 0, "easy": 0, "medium": 0, "hard": 0}


# Scoreboard for the player side of every match
@dataclass
class Stats:
    games_started: int = 0
    games_won: int = 0
    games_lost: int = 0

    current_streak: int = 0
    best_streak: int = 0

    total_guesses_in_wins: int = 0
    fastest_win_guesses: Optional[int] = None

    started_by_mode: Dict[str, int] = field(default_factory=_mode_counter)
    won_by_mode: Dict[str, int] = field(default_factory=_mode_counter)


class MatchStore:
    def __init__(self, rng=None) -> None:
        self._matches: Dict[str, Match] = {}
        self._lock = RLock()
        self._stats = Stats()
        # Only used for the AI's choices; None = module RNG
        self._rng = rng

    def create(
        self,
        secret: Code,
        mode: MatchMode = "practice",
        difficulty: Optional[Difficulty] = None,
        player_secret: Optional[Code] = None,
    ) -> Match:
        """
        Raises InvalidCodeError if a secret isn't a valid code, MatchError if
        an AI match has no player secret.
        """
        validate_code(secret)
        if mode == "ai":
            if player_secret is None:
                raise MatchError("An AI match needs your secret number.")
            validate_code(player_secret)
            difficulty = difficulty or "medium"
            if difficulty not in DIFFICULTIES:
                raise MatchError(f"Unknown difficulty {difficulty!r}.")
        elif mode == "practice":
            difficulty = None
            player_secret = None
        else:
            raise MatchError(f"Unknown mode {mode!r}.")

        match = Match(
            id=str(uuid4()),
            secret=secret,
            mode=mode,
            difficulty=difficulty,
            player_secret=player_secret,
        )
        with self._lock:
            self._matches[match.id] = match
            self._stats.games_started += 1
            self._stats.started_by_mode[match.stats_key] += 1

        logger.info("Match %s created (%s)", match.id, match.stats_key)
        return match

    def get(self, match_id: str) -> Optional[Match]:
        with self._lock:
            return self._matches.get(match_id)

    def guess(self, match_id: str, attempt: Code) -> Optional[Match]:
        """
        Player turn, then (AI matches only) the AI's turn.
        Returns None for an unknown match.
        """
        validate_code(attempt)

        match = self.get(match_id)
        if match is None:
            return None

        # Only this match waits while the AI thinks; the store lock is free
        with match.lock:
            if match.status != "in_progress":
                raise MatchFinishedError(match.status)

            for record in match.history:
                if record.guess == attempt:
                    raise RepeatedGuessError(attempt)

            result = score(match.secret, attempt)
            match.history.append(GuessRecord(attempt, result.dead, result.wounded))
            match.updated_at = time()

            if is_win(result):
                self._finish(match, "won")
                return match

            if match.mode == "ai":
                self._ai_turn(match)

            return match

    def _ai_turn(self, match: Match) -> None:
        ai_guess = next_guess(match.difficulty, match.ai_history, rng=self._rng)
        # Score it ourselves against the stored secret
        result = score(match.player_secret, ai_guess)
        match.ai_history.append(GuessRecord(ai_guess, result.dead, result.wounded))
        logger.debug("Match %s: AI guessed %s -> %d dead, %d wounded",
                     match.id, ai_guess, result.dead, result.wounded)

        if is_win(result):
            self._finish(match, "lost")

    def leave(self, match_id: str) -> Optional[Match]:
        """Forfeit: an in-progress match counts as lost. Finished matches are left alone."""
        match = self.get(match_id)
        if match is None:
            return None
        with match.lock:
            if match.status == "in_progress":
                self._finish(match, "lost")
            return match

    def _finish(self, match: Match, status: MatchStatus) -> None:
        # Called with match.lock held, exactly once per match
        match.status = status
        match.updated_at = time()

        with self._lock:
            if status == "won":
                self._stats.games_won += 1
                self._stats.won_by_mode[match.stats_key] += 1

                self._stats.current_streak += 1
                if self._stats.current_streak > self._stats.best_streak:
                    self._stats.best_streak = self._stats.current_streak

                guesses_used = len(match.history)
                self._stats.total_guesses_in_wins += guesses_used
                if self._stats.fastest_win_guesses is None or guesses_used < self._stats.fastest_win_guesses:
                    self._stats.fastest_win_guesses = guesses_used
            else:
                self._stats.games_lost += 1
                self._stats.current_streak = 0

        logger.info("Match %s %s after %d guesses", match.id, status, len(match.history))

    def get_secret(self, match_id: str) -> Optional[Code]:
        """Return the secret ONLY for finished matches; else None."""
        match = self.get(match_id)
        if match is None or match.status == "in_progress":
            return None
        return match.secret

    def get_stats(self) -> Stats:
        return self._stats

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = Stats()
