"""
AI opponent: picks the next guess from the AI's own guess history.

Three tiers:
- easy   -> random code every turn, history ignored
- medium -> random code that is still consistent with every past feedback
- hard   -> minimax over the consistent codes, relaxed a little and broken
            by entropy, then a random pick from a short list so the AI
            doesn't play the same line every game

Nothing is kept between calls: the candidate pool is rebuilt from the full
history each time, so the same (difficulty, history) can be replayed after
a restart.
"""

import logging
import math
import random
from collections import defaultdict
from dataclasses import dataclass
from itertools import permutations
from typing import Dict, List, Optional

from .config import SOLVER_SETTINGS, SolverSettings
from .engine import CODE_LENGTH, DIGITS, is_win, random_code, score
from .types import Code, Difficulty, GuessRecord, History, Score

logger = logging.getLogger(__name__)

# Every valid code, in lexicographic order ("0123" ... "9876"); 10*9*8*7 = 5040.
ALL_CODES = tuple("".join(p) for p in permutations(DIGITS, CODE_LENGTH))


def all_codes():
    return ALL_CODES


@dataclass(frozen=True)
class GuessEvaluation:
    guess: Code
    worst_case: int  # size of the biggest outcome group (lower is better)
    entropy: float   # bits of information over the outcome groups (higher is better)


def is_consistent(candidate: Code, history: History) -> bool:
    """Would `candidate`, as the secret, have produced every recorded feedback?"""
    for record in history:
        if score(candidate, record.guess) != (record.dead, record.wounded):
            return False
    return True


def candidate_pool(history: History) -> List[Code]:
    """All codes still possible after `history`. The real secret is always in here."""
    return [code for code in all_codes() if is_consistent(code, history)]


def partition(guess: Code, pool) -> Dict[Score, int]:
    """Group sizes of `pool` keyed by the feedback `guess` would get."""
    groups: Dict[Score, int] = defaultdict(int)
    for candidate in pool:
        groups[score(candidate, guess)] += 1
    return dict(groups)


def evaluate_guess(guess: Code, pool) -> GuessEvaluation:
    groups = partition(guess, pool)
    total = len(pool)
    entropy = 0.0
    for size in groups.values():
        p = size / total
        entropy -= p * math.log2(p)
    worst = max(groups.values()) if groups else 0
    return GuessEvaluation(guess=guess, worst_case=worst, entropy=entropy)


def acceptable_worst_case(min_worst_case: int, relaxation: float) -> int:
    """
    Largest worst-case group we still accept: at least one more than the
    optimum, or `relaxation` (15% by default) more, whichever is bigger.
    """
    return max(min_worst_case + 1, math.ceil(min_worst_case * (1 + relaxation)))


def shortlist(evaluations: List[GuessEvaluation], settings: SolverSettings) -> List[GuessEvaluation]:
    """Guesses the hard AI picks from at random, per `settings.hard_strategy`."""
    if not evaluations:
        return []

    if settings.hard_strategy == "minimax":
        best = min(evaluations, key=lambda e: (e.worst_case, -e.entropy))
        return [best]

    if settings.hard_strategy == "entropy":
        best = max(evaluations, key=lambda e: (e.entropy, -e.worst_case))
        return [best]

    min_worst = min(e.worst_case for e in evaluations)
    threshold = acceptable_worst_case(min_worst, settings.relaxation)
    acceptable = [e for e in evaluations if e.worst_case <= threshold]
    acceptable.sort(key=lambda e: e.entropy, reverse=True)
    return acceptable[: settings.top_k]


# ---------------- Tiers ----------------

def easy_guess(history: History, rng=None) -> Code:
    # No learning at all
    return random_code(rng)


def medium_guess(history: History, rng=None, settings: SolverSettings = SOLVER_SETTINGS) -> Code:
    rng = rng or random
    if not history:
        return settings.medium_opener

    pool = candidate_pool(history)
    if not pool:
        logger.warning("Empty candidate pool after %d guesses; falling back to a random code", len(history))
        return random_code(rng)

    logger.debug("medium: %d candidates left", len(pool))
    return rng.choice(pool)


def hard_guess(history: History, rng=None, settings: SolverSettings = SOLVER_SETTINGS) -> Code:
    rng = rng or random
    if not history:
        return rng.choice(settings.hard_openers)

    pool = candidate_pool(history)
    if not pool:
        logger.warning("Empty candidate pool after %d guesses; falling back to a random code", len(history))
        return random_code(rng)

    # Secret is determined
    if len(pool) == 1:
        return pool[0]

    if len(pool) > settings.sample_size:
        to_check = rng.sample(pool, settings.sample_size)
    else:
        to_check = pool

    evaluations = [evaluate_guess(g, pool) for g in to_check]
    picks = shortlist(evaluations, settings)
    if not picks:
        logger.warning("No guesses evaluated for a pool of %d; falling back to a random code", len(pool))
        return random_code(rng)

    choice = rng.choice(picks)
    logger.debug(
        "hard: %d candidates, %d evaluated, picked %s (worst case %d, %.3f bits) from %d",
        len(pool), len(evaluations), choice.guess, choice.worst_case, choice.entropy, len(picks),
    )
    return choice.guess


def next_guess(
    difficulty: Difficulty,
    history: History,
    rng: Optional[random.Random] = None,
    settings: Optional[SolverSettings] = None,
) -> Code:
    """
    The AI's move for this turn. `history` is the AI's own (guess, dead, wounded)
    records for the current match, oldest first; it is never modified.
    Unknown difficulties play as medium.
    """
    settings = settings or SOLVER_SETTINGS
    if difficulty == "easy":
        return easy_guess(history, rng)
    if difficulty == "hard":
        return hard_guess(history, rng, settings)
    return medium_guess(history, rng, settings)


def play_out(
    secret: Code,
    difficulty: Difficulty,
    max_turns: int = 50,
    rng: Optional[random.Random] = None,
    settings: Optional[SolverSettings] = None,
) -> List[GuessRecord]:
    """
    Let the AI play alone against `secret` the way a match would: ask for a
    guess, score it, record it. Stops at 4 Dead or after `max_turns`.
    """
    history: List[GuessRecord] = []
    while len(history) < max_turns:
        guess = next_guess(difficulty, history, rng=rng, settings=settings)
        result = score(secret, guess)
        history.append(GuessRecord(guess, result.dead, result.wounded))
        if is_win(result):
            break
    return history
