"""
Testing pure game logic.
"""

import random

import pytest

from deadwounded.engine import (
    DuplicateDigit,
    InvalidCodeError,
    NonDigitCharacter,
    WrongLength,
    check_code,
    is_valid_code,
    is_win,
    random_code,
    score,
    validate_code,
)
from deadwounded.solver import ALL_CODES
from deadwounded.types import Score


@pytest.mark.parametrize("code", ["1234", "0123", "9876"])
def test_validate_accepts_unique_digits(code):
    assert validate_code(code) is None
    assert is_valid_code(code)


@pytest.mark.parametrize(
    "code, error",
    [
        ("123", WrongLength),
        ("12345", WrongLength),
        ("", WrongLength),
        (1234, WrongLength),
        (None, WrongLength),
        ("12ab", NonDigitCharacter),
        ("12 4", NonDigitCharacter),
        ("-123", NonDigitCharacter),
        ("1123", DuplicateDigit),
        ("1111", DuplicateDigit),
    ],
)
def test_validate_rejects_with_specific_reason(code, error):
    with pytest.raises(error):
        validate_code(code)
    assert isinstance(check_code(code), error)
    assert not is_valid_code(code)


def test_checks_run_in_order():
    # Too long AND has letters AND repeats: length wins
    assert isinstance(check_code("aa1234"), WrongLength)
    # Letters AND repeats: non-digit wins
    assert isinstance(check_code("aa12"), NonDigitCharacter)


def test_each_reason_has_its_own_message():
    errors = [check_code("123"), check_code("12ab"), check_code("1123")]
    assert len({e.reason for e in errors}) == 3
    assert len({str(e) for e in errors}) == 3
    for e in errors:
        assert isinstance(e, InvalidCodeError)
        assert isinstance(e, ValueError)
    assert "unique" in str(errors[2])


@pytest.mark.parametrize(
    "secret, guess, expected",
    [
        ("1234", "5678", (0, 0)),
        ("1234", "4321", (0, 4)),
        ("1743", "3854", (0, 2)),
        ("1743", "3845", (1, 1)),
        ("1234", "1243", (2, 2)),
        ("0123", "0456", (1, 0)),
        ("1234", "1324", (2, 2)),
        ("1234", "1567", (1, 0)),
        ("1234", "0234", (3, 0)),
    ],
)
def test_score_known_fixtures(secret, guess, expected):
    assert score(secret, guess) == expected


def test_score_returns_named_pair():
    result = score("1743", "3845")
    assert isinstance(result, Score)
    assert result.dead == 1
    assert result.wounded == 1


def test_score_of_code_against_itself_is_four_dead():
    for code in ALL_CODES:
        assert score(code, code) == (4, 0)


def test_score_stays_in_bounds():
    rng = random.Random(7)
    for _ in range(2000):
        secret = random_code(rng)
        guess = random_code(rng)
        dead, wounded = score(secret, guess)
        assert 0 <= dead <= 4
        assert 0 <= wounded <= 4
        assert dead + wounded <= 4


def test_score_wounded_uses_each_secret_digit_once():
    # Repeated digits never reach score() in a real game, but one secret
    # digit must still not wound two guess digits
    assert score("1234", "5511") == (0, 1)
    assert score("1123", "2311") == (0, 4)


def test_is_win_true_and_false():
    assert is_win(Score(4, 0)) is True
    assert is_win((4, 0)) is True
    for dead in range(4):
        assert is_win(Score(dead, 0)) is False
    assert is_win(Score(0, 4)) is False


def test_random_code_is_always_valid():
    rng = random.Random(3)
    for _ in range(500):
        assert is_valid_code(random_code(rng))
    for _ in range(50):
        assert is_valid_code(random_code())


def test_random_code_varies():
    codes = {random_code() for _ in range(20)}
    assert len(codes) > 1


def test_random_code_is_reproducible_with_seed():
    assert random_code(random.Random(99)) == random_code(random.Random(99))
