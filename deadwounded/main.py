'''
Dead & Wounded API

Core:
POST /codes/validate        -> is this a valid secret/guess? (and why not)
GET  /codes/random          -> a random valid code
POST /score                 -> dead/wounded for a secret + guess
POST /ai/next-guess         -> the AI's move for a given history

Matches (in memory):
POST /matches               -> start a practice or AI match
GET  /matches/{id}          -> read state & history
POST /matches/{id}/guess    -> your guess (+ the AI's reply in AI matches)
POST /matches/{id}/leave    -> forfeit

Extras:
GET  /stats                 -> scoreboard
POST /stats/reset           -> reset scoreboard
'''

import logging

from fastapi import Depends, FastAPI, HTTPException

from .config import APP_ENV, configure_logging
from .engine import check_code, is_win, random_code, validate_code, score
from .solver import next_guess
from .store import Match, MatchFinishedError, MatchStore
from .schemas import (
    CodeOut,
    GuessEntryOut,
    GuessRequest,
    MatchState,
    NewMatchRequest,
    NextGuessOut,
    NextGuessRequest,
    ScoreOut,
    ScoreRequest,
    StatsOut,
    ValidateOut,
    ValidateRequest,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Dead & Wounded API", version="1.0.0")

# One store per process; tests swap it out via dependency_overrides
_store = MatchStore()


def get_store() -> MatchStore:
    return _store


def _to_match_state(match: Match, store: MatchStore) -> MatchState:
    finished = match.status != "in_progress"
    return MatchState(
        match_id=match.id,
        mode=match.mode,
        difficulty=match.difficulty,
        status=match.status,
        history=[GuessEntryOut(guess=r.guess, dead=r.dead, wounded=r.wounded) for r in match.history],
        ai_history=[GuessEntryOut(guess=r.guess, dead=r.dead, wounded=r.wounded) for r in match.ai_history],
        # Keep UI behavior: when the match ends, include the secret
        secret=store.get_secret(match.id) if finished else None,
        note=f"Match {match.status}. No more guesses allowed." if finished else None,
    )

# ---------------- Core routes ----------------

@app.post("/codes/validate", response_model=ValidateOut, summary="Check a secret or guess")
def validate(payload: ValidateRequest) -> ValidateOut:
    error = check_code(payload.code)
    if error is None:
        return ValidateOut(code=payload.code, valid=True)
    return ValidateOut(code=payload.code, valid=False, reason=error.reason, message=str(error))


@app.get("/codes/random", response_model=CodeOut, summary="Generate a random secret")
def get_random_code() -> CodeOut:
    return CodeOut(code=random_code())


@app.post("/score", response_model=ScoreOut, summary="Score a guess against a secret")
def score_guess(payload: ScoreRequest) -> ScoreOut:
    try:
        validate_code(payload.secret)
        validate_code(payload.guess)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    result = score(payload.secret, payload.guess)
    return ScoreOut(dead=result.dead, wounded=result.wounded, win=is_win(result))


@app.post("/ai/next-guess", response_model=NextGuessOut, summary="Ask the AI for its next guess")
def ai_next_guess(payload: NextGuessRequest) -> NextGuessOut:
    history = [record.to_record() for record in payload.history]
    guess = next_guess(payload.difficulty, history)
    return NextGuessOut(guess=guess, difficulty=payload.difficulty)

# ---------------- Matches ----------------

@app.post("/matches", response_model=MatchState, summary="Start a practice or AI match")
def start_match(
    payload: NewMatchRequest,
    store: MatchStore = Depends(get_store),
) -> MatchState:
    secret = random_code()
    try:
        match = store.create(
            secret,
            mode=payload.mode,
            difficulty=payload.difficulty,
            player_secret=payload.secret,
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return _to_match_state(match, store)


@app.get("/matches/{match_id}", response_model=MatchState, summary="Get current match state")
def get_match(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> MatchState:
    match = store.get(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return _to_match_state(match, store)


@app.post("/matches/{match_id}/guess", response_model=MatchState, summary="Submit a guess")
def submit_guess(
    match_id: str,
    payload: GuessRequest,
    store: MatchStore = Depends(get_store),
) -> MatchState:
    # store.guess() validates, rejects repeats and plays the AI's reply
    try:
        updated = store.guess(match_id, payload.guess)
    except MatchFinishedError as fe:
        raise HTTPException(status_code=409, detail=str(fe))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    if not updated:
        raise HTTPException(status_code=404, detail="Match not found")
    return _to_match_state(updated, store)


@app.post("/matches/{match_id}/leave", response_model=MatchState, summary="Forfeit a match")
def leave_match(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> MatchState:
    match = store.leave(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return _to_match_state(match, store)

# ---------------- Scoreboard ----------------

@app.get("/stats", response_model=StatsOut, summary="Get scoreboard")
def get_stats(store: MatchStore = Depends(get_store)) -> StatsOut:
    stats = store.get_stats()
    avg = (stats.total_guesses_in_wins / stats.games_won) if stats.games_won > 0 else None
    return StatsOut(
        games_started=stats.games_started,
        games_won=stats.games_won,
        games_lost=stats.games_lost,
        current_streak=stats.current_streak,
        best_streak=stats.best_streak,
        average_guesses_to_win=avg,
        fastest_win_guesses=stats.fastest_win_guesses,
        started_by_mode=dict(stats.started_by_mode),
        won_by_mode=dict(stats.won_by_mode),
    )


@app.post("/stats/reset", summary="Reset the scoreboard")
def reset_stats(store: MatchStore = Depends(get_store)) -> dict:
    store.reset_stats()
    return {"message": "Stats reset."}


logger.info("Dead & Wounded API ready (env=%s)", APP_ENV)
