"""
Single place to:
- Read settings from env (a local .env is loaded if present)
- Build the AI solver tunables (SolverSettings)
- Set up logging for the app

Defaults match the tuned values the hard AI was balanced with.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from .engine import check_code

# 1) Load env vars from .env if present
# dev convenience; in prod the platform injects env vars
load_dotenv()

# 2) General app settings
APP_ENV = os.getenv("APP_ENV", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HARD_STRATEGIES = ("relaxed", "minimax", "entropy")


@dataclass(frozen=True)
class SolverSettings:
    # How many pool members hard mode scores when the pool is big
    sample_size: int = 300
    # Guesses up to this much worse than the minimax optimum stay "acceptable"
    relaxation: float = 0.15
    # Size of the entropy shortlist we pick from at random
    top_k: int = 5
    hard_openers: Tuple[str, ...] = ("0123", "0167", "1234", "5678")
    medium_opener: str = "0123"
    hard_strategy: str = "relaxed"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}.")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from None
    if not math.isfinite(value) or value < 0:
        raise RuntimeError(f"{name} must be a finite, non-negative number, got {value}.")
    return value


def _code_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    code = raw.strip()
    error = check_code(code)
    if error is not None:
        raise RuntimeError(f"{name}: {code!r} is not a valid code ({error}).")
    return code


def load_solver_settings() -> SolverSettings:
    """Read the AI_* env vars; anything unset keeps the SolverSettings default."""
    defaults = SolverSettings()

    openers = defaults.hard_openers
    raw_openers = os.getenv("AI_HARD_OPENERS")
    if raw_openers and raw_openers.strip():
        openers = tuple(part.strip() for part in raw_openers.split(",") if part.strip())
        for code in openers:
            error = check_code(code)
            if error is not None:
                raise RuntimeError(f"AI_HARD_OPENERS: {code!r} is not a valid code ({error}).")
        if not openers:
            raise RuntimeError("AI_HARD_OPENERS must list at least one code.")

    strategy = os.getenv("AI_HARD_STRATEGY", defaults.hard_strategy).strip().lower()
    if strategy not in HARD_STRATEGIES:
        raise RuntimeError(
            f"AI_HARD_STRATEGY must be one of {', '.join(HARD_STRATEGIES)}, got {strategy!r}."
        )

    return SolverSettings(
        sample_size=_int_env("AI_HARD_SAMPLE_SIZE", defaults.sample_size),
        relaxation=_float_env("AI_HARD_RELAXATION", defaults.relaxation),
        top_k=_int_env("AI_HARD_TOP_K", defaults.top_k),
        hard_openers=openers,
        medium_opener=_code_env("AI_MEDIUM_OPENER", defaults.medium_opener),
        hard_strategy=strategy,
    )


# 3) Settings the solver uses when the caller doesn't pass its own
SOLVER_SETTINGS = load_solver_settings()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """One stream handler on the root logger; calling it twice is harmless."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level)
