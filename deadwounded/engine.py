"""
Pure game logic (no HTTP, no storage).
We compute two feedback numbers for each guess:
- dead: how many digits are right AND in the right place
- wounded: how many digits appear in the secret but at a different place

Codes are 4 characters, digits 0..9, no digit repeated.
"""

import random
from typing import Optional

from .types import Code, Score

CODE_LENGTH = 4
DIGITS = "0123456789"


class InvalidCodeError(ValueError):
    """Base for the three ways a code can be rejected."""

    reason = "invalid_code"
    message = "Invalid code"

    def __init__(self, code=None):
        self.code = code
        super().__init__(self.message)


class WrongLength(InvalidCodeError):
    reason = "wrong_length"
    message = f"Must be exactly {CODE_LENGTH} digits"


class NonDigitCharacter(InvalidCodeError):
    reason = "non_digit_character"
    message = "Must contain only digits 0-9"


class DuplicateDigit(InvalidCodeError):
    reason = "duplicate_digit"
    message = "Digits must be unique (no repetition)"


def check_code(code) -> Optional[InvalidCodeError]:
    """
    Run the checks in order and stop at the first failure.
    Returns the error (not raised) or None when the code is fine.
    """
    # 1. Length (anything that is not a string can't be a code either)
    if not isinstance(code, str) or len(code) != CODE_LENGTH:
        return WrongLength(code)

    # 2. Only 0..9 (str.isdigit() would also accept things like "²")
    for ch in code:
        if ch not in DIGITS:
            return NonDigitCharacter(code)

    # 3. No repeats
    if len(set(code)) != CODE_LENGTH:
        return DuplicateDigit(code)

    return None


def validate_code(code) -> None:
    """Raise the matching InvalidCodeError if `code` is not a valid Digit-Code."""
    error = check_code(code)
    if error is not None:
        raise error


def is_valid_code(code) -> bool:
    return check_code(code) is None


def score(secret: Code, guess: Code) -> Score:
    """
    Both arguments must already be validated.

    Example:
      secret = "1743"
      guess  = "3845"
      dead    = 1  (the 4 in third place)
      wounded = 1  (the 3 is in the secret, but last)
    """
    claimed_secret = [False] * CODE_LENGTH
    claimed_guess = [False] * CODE_LENGTH

    # 1. Dead pass: exact positions, claimed on both sides
    dead = 0
    i = 0
    while i < CODE_LENGTH:
        if guess[i] == secret[i]:
            dead += 1
            claimed_secret[i] = True
            claimed_guess[i] = True
        i += 1

    # 2. Wounded pass: each secret digit can satisfy only one guess digit
    wounded = 0
    i = 0
    while i < CODE_LENGTH:
        if not claimed_guess[i]:
            j = 0
            while j < CODE_LENGTH:
                if not claimed_secret[j] and guess[i] == secret[j]:
                    wounded += 1
                    claimed_secret[j] = True
                    break
                j += 1
        i += 1

    return Score(dead, wounded)


def is_win(result: Score) -> bool:
    """Win = 4 Dead."""
    return result[0] == CODE_LENGTH


def random_code(rng=None) -> Code:
    """
    Shuffle the ten digits and keep the first four.
    `rng` can be a random.Random for reproducible runs; defaults to the module RNG.
    """
    rng = rng or random
    digits = list(DIGITS)
    rng.shuffle(digits)
    return "".join(digits[:CODE_LENGTH])
