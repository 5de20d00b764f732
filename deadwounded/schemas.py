"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.

Codes travel as strings ("0123"), never as numbers.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .engine import validate_code
from .types import Difficulty, GuessRecord, MatchMode, MatchStatus


def _valid_code(value: str) -> str:
    # Raises a ValueError subclass; pydantic turns it into a 422
    validate_code(value)
    return value


# 1. Validation check for any submitted code
class ValidateRequest(BaseModel):
    code: str = Field(..., description="Candidate secret or guess, e.g. '0123'")


class ValidateOut(BaseModel):
    code: str
    valid: bool
    reason: Optional[str] = Field(None, description="wrong_length | non_digit_character | duplicate_digit")
    message: Optional[str] = Field(None, description="User-facing reason the code was rejected")


class CodeOut(BaseModel):
    code: str = Field(..., description="A valid 4-digit code with unique digits")


# 2. Scoring a guess against a secret
class ScoreRequest(BaseModel):
    secret: str = Field(..., description="The secret code")
    guess: str = Field(..., description="The guess to score")


class ScoreOut(BaseModel):
    dead: int = Field(..., description="Right digit, right place")
    wounded: int = Field(..., description="Right digit, wrong place")
    win: bool = Field(..., description="True when dead == 4")


# 3. One past turn, as the AI sees it
class GuessRecordIn(BaseModel):
    guess: str
    dead: int = Field(..., ge=0, le=4)
    wounded: int = Field(..., ge=0, le=4)

    @field_validator("guess")
    @classmethod
    def validate_guess(cls, value: str) -> str:
        return _valid_code(value)

    @model_validator(mode="after")
    def check_total(self) -> "GuessRecordIn":
        if self.dead + self.wounded > 4:
            raise ValueError("dead + wounded cannot be more than 4.")
        return self

    def to_record(self) -> GuessRecord:
        return GuessRecord(self.guess, self.dead, self.wounded)


class NextGuessRequest(BaseModel):
    difficulty: Difficulty = "medium"
    history: List[GuessRecordIn] = Field(default_factory=list, description="AI's past guesses, oldest first")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"difficulty": "hard", "history": []},
                {"difficulty": "medium", "history": [{"guess": "0123", "dead": 1, "wounded": 1}]},
            ]
        }
    }


class NextGuessOut(BaseModel):
    guess: str
    difficulty: Difficulty


# 4. Matches
class NewMatchRequest(BaseModel):
    mode: MatchMode = "practice"
    difficulty: Optional[Difficulty] = Field(None, description="AI strength (ai mode only)")
    secret: Optional[str] = Field(None, description="Your secret number (ai mode only)")

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _valid_code(value)

    @model_validator(mode="after")
    def secret_for_ai(self) -> "NewMatchRequest":
        if self.mode == "ai" and self.secret is None:
            raise ValueError("An AI match needs your secret number.")
        return self


class GuessRequest(BaseModel):
    # Not validated here: the store does it so the user gets the specific reason
    guess: str = Field(..., description="Your guess, e.g. '0123'")


class GuessEntryOut(BaseModel):
    guess: str
    dead: int
    wounded: int


class MatchState(BaseModel):
    match_id: str
    mode: MatchMode
    difficulty: Optional[Difficulty] = None
    status: MatchStatus
    history: List[GuessEntryOut] = Field(..., description="Your guesses with feedback")
    ai_history: List[GuessEntryOut] = Field(default_factory=list, description="The AI's guesses against your secret")
    secret: Optional[str] = Field(None, description="The secret (only revealed once the match is over)")
    note: Optional[str] = None


# 5. Scoreboard
class StatsOut(BaseModel):
    games_started: int
    games_won: int
    games_lost: int
    current_streak: int
    best_streak: int
    average_guesses_to_win: Optional[float] = Field(None, description="Average number of guesses used in wins")
    fastest_win_guesses: Optional[int] = Field(None, description="Fewest guesses taken to win a match")
    started_by_mode: Dict[str, int]
    won_by_mode: Dict[str, int]
