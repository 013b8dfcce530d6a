"""Router for playing the letter-guessing game on a question."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from echotutor.database import get_db
from echotutor.schemas import StartGameRequest, GameSessionOut, GuessRequest, GuessResponse
from echotutor.services.errors import InvalidGuessLength, InvalidInput, InvalidState, NotFoundError
from echotutor.services.game import start_session, submit_guess, load_game, session_view

router = APIRouter(prefix="/game", tags=["game"])


@router.post("/start", response_model=GameSessionOut)
def start(request: StartGameRequest, db: Session = Depends(get_db)):
    """
    Start a new game for a question.

    The response tells how many letters the answer has and an empty board.
    """
    try:
        record, game = start_session(db, request.question_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_view(record, game)


@router.get("/{session_id}", response_model=GameSessionOut)
def get_session(session_id: str, db: Session = Depends(get_db)):
    """Get the current board and state of a game."""
    try:
        record, game = load_game(db, session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session_view(record, game)


@router.post("/{session_id}/guess", response_model=GuessResponse)
def guess(session_id: str, request: GuessRequest, db: Session = Depends(get_db)):
    """
    Submit a guess.

    A wrong-length guess is rejected with 400 and does not use up an attempt.
    Winning adds the question to the flashcard deck.
    """
    try:
        return submit_guess(db, session_id, request.guess)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidGuessLength as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidState as e:
        raise HTTPException(status_code=409, detail=str(e))
