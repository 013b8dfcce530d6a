"""
Letter-guessing game over a question's answer.

WordGame is the in-memory state machine; the module-level functions load and
store it as a GameSession record and fire the win/loss follow-ups.
"""
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from echotutor.models import GameSession, GameState, LetterState, Question, Flashcard
from echotutor.services.errors import InvalidGuessLength, InvalidInput, InvalidState, NotFoundError
from echotutor.services.evaluator import evaluate_guess, normalize_answer
from echotutor.services.review import DEMO_USER_ID, create_flashcard_for_question

MAX_GUESSES = 6


class WordGame:
    """State machine for one play-through: playing until won or out of guesses."""

    def __init__(self, answer: str, max_guesses: int = MAX_GUESSES):
        self.target = normalize_answer(answer)
        if not self.target:
            raise InvalidInput("Answer has no letters to guess")
        self.max_guesses = max_guesses
        self.guesses: List[str] = []
        self.rows: List[List[LetterState]] = []
        self.state = GameState.playing

    @classmethod
    def replay(cls, answer: str, guesses: List[str], max_guesses: int = MAX_GUESSES) -> "WordGame":
        """Rebuild a game by resubmitting stored guesses in order."""
        game = cls(answer, max_guesses=max_guesses)
        for guess in guesses:
            game.submit(guess)
        return game

    @property
    def answer_length(self) -> int:
        return len(self.target)

    @property
    def attempts_used(self) -> int:
        return len(self.guesses)

    @property
    def is_over(self) -> bool:
        return self.state != GameState.playing

    def submit(self, raw_guess: str) -> List[LetterState]:
        """
        Play one guess.

        Raises:
            InvalidState: the game is already won or lost
            InvalidGuessLength: normalized guess has the wrong length; the
                attempt is not consumed
        """
        if self.is_over:
            raise InvalidState(f"Game is already {self.state.value}")

        guess = normalize_answer(raw_guess)
        if len(guess) != self.answer_length:
            raise InvalidGuessLength(self.answer_length, len(guess))

        tiles = evaluate_guess(self.target, guess)
        self.guesses.append(guess)
        self.rows.append(tiles)

        if guess == self.target:
            self.state = GameState.won
        elif len(self.guesses) >= self.max_guesses:
            self.state = GameState.lost

        return tiles

    def board(self) -> List[List[dict]]:
        """Full grid of max_guesses rows; unplayed rows are empty tiles."""
        grid = [
            [{"letter": letter, "state": state.value} for letter, state in zip(guess, tiles)]
            for guess, tiles in zip(self.guesses, self.rows)
        ]
        empty_row = [{"letter": "", "state": LetterState.empty.value}] * self.answer_length
        while len(grid) < self.max_guesses:
            grid.append(list(empty_row))
        return grid


def _get_question(db: Session, question_id: str, user_id: str) -> Question:
    question = db.query(Question).filter(
        Question.id == question_id,
        Question.user_id == user_id
    ).first()
    if not question:
        raise NotFoundError(f"Question {question_id} not found")
    return question


def load_game(db: Session, session_id: str, user_id: str = DEMO_USER_ID) -> Tuple[GameSession, WordGame]:
    """Load a stored session and replay its guesses."""
    record = db.query(GameSession).filter(
        GameSession.id == session_id,
        GameSession.user_id == user_id
    ).first()
    if not record:
        raise NotFoundError(f"Game session {session_id} not found")

    game = WordGame.replay(record.question.answer, record.guesses or [])
    return record, game


def session_view(record: GameSession, game: WordGame) -> dict:
    """Serializable snapshot of a session for the API."""
    view = {
        "session_id": record.id,
        "question_id": record.question_id,
        "question": record.question.question,
        "topic": record.question.topic,
        "difficulty": record.question.difficulty.value,
        "state": game.state.value,
        "attempts_used": game.attempts_used,
        "max_guesses": game.max_guesses,
        "answer_length": game.answer_length,
        "board": game.board(),
        "answer": None,
        "explanation": None,
    }
    # Reveal only after the game is over
    if game.is_over:
        view["answer"] = record.question.answer
        view["explanation"] = record.question.explanation
    return view


def start_session(db: Session, question_id: str, user_id: str = DEMO_USER_ID) -> Tuple[GameSession, WordGame]:
    """
    Start a new play-through for a question.

    Raises:
        NotFoundError: question does not exist
        InvalidInput: answer normalizes to an empty string
    """
    question = _get_question(db, question_id, user_id)
    game = WordGame(question.answer)

    record = GameSession(
        id=str(uuid.uuid4()),
        user_id=user_id,
        question_id=question.id,
        material_id=question.material_id,
        guesses=[],
        state=GameState.playing,
        attempts_used=0,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    print(f"[GAME] Started session {record.id} for question {question.id} ({game.answer_length} letters)")
    return record, game


def on_session_won(db: Session, record: GameSession, attempts_used: int, now: datetime) -> Flashcard:
    """Mark the session completed and seed a flashcard for its question."""
    record.completed = True
    record.attempts_used = attempts_used
    record.finished_at = now
    return create_flashcard_for_question(db, record.question, now, user_id=record.user_id)


def on_session_lost(db: Session, record: GameSession, attempts_used: int, now: datetime) -> None:
    """Mark the session finished without a flashcard."""
    record.completed = False
    record.attempts_used = attempts_used
    record.finished_at = now


def submit_guess(
    db: Session,
    session_id: str,
    raw_guess: str,
    user_id: str = DEMO_USER_ID,
    now: Optional[datetime] = None
) -> dict:
    """
    Submit a guess for a stored session and persist the outcome.

    The session only advances if the commit succeeds; on a database error
    the transaction is rolled back and the error re-raised.

    Returns:
        Session snapshot plus "tiles" for this guess and "flashcard_id"
        when the guess won the game
    """
    if now is None:
        now = datetime.utcnow()

    record, game = load_game(db, session_id, user_id)
    tiles = game.submit(raw_guess)

    flashcard = None
    try:
        record.guesses = list(game.guesses)
        record.attempts_used = game.attempts_used
        record.state = game.state

        if game.state == GameState.won:
            flashcard = on_session_won(db, record, game.attempts_used, now)
        elif game.state == GameState.lost:
            on_session_lost(db, record, game.attempts_used, now)

        db.commit()
    except Exception as e:
        db.rollback()
        print(f"[GAME ERROR] Failed to save guess for session {session_id}: {e}")
        raise

    if game.is_over:
        print(f"[GAME] Session {session_id} {game.state.value} after {game.attempts_used} attempts")

    result = session_view(record, game)
    result["tiles"] = [
        {"letter": letter, "state": state.value}
        for letter, state in zip(game.guesses[-1], tiles)
    ]
    result["flashcard_id"] = flashcard.id if flashcard else None
    return result
