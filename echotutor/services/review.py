import uuid
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from echotutor.models import Flashcard, Question, Review
from echotutor.services.errors import NotFoundError
from echotutor.services.scheduler import INITIAL_EASE_FACTOR, INITIAL_INTERVAL_DAYS, schedule

# Demo user ID for testing (no authentication yet)
DEMO_USER_ID = "demo-user"


def select_due(flashcards: Iterable[Flashcard], now: datetime) -> List[Flashcard]:
    """
    Flashcards due at `now`, earliest next_review first.

    Cards with the same next_review keep their input order.
    """
    due = [card for card in flashcards if card.next_review <= now]
    return sorted(due, key=lambda card: card.next_review)


def get_due_flashcards(db: Session, now: Optional[datetime] = None, user_id: str = DEMO_USER_ID) -> List[Flashcard]:
    """
    Get the review queue for a user.

    Args:
        db: Database session
        now: Current datetime (defaults to utcnow)
        user_id: Owner of the flashcards

    Returns:
        Due flashcards ordered by next_review
    """
    if now is None:
        now = datetime.utcnow()

    flashcards = db.query(Flashcard).filter(
        Flashcard.user_id == user_id
    ).order_by(Flashcard.created_at.asc()).all()

    return select_due(flashcards, now)


def create_flashcard_for_question(
    db: Session,
    question: Question,
    now: datetime,
    user_id: str = DEMO_USER_ID
) -> Flashcard:
    """
    Seed a flashcard for a question the learner just solved.

    A question gets at most one flashcard per user; solving it again returns
    the existing card unchanged. The caller commits.
    """
    existing = db.query(Flashcard).filter(
        Flashcard.user_id == user_id,
        Flashcard.question_id == question.id
    ).first()
    if existing:
        print(f"[REVIEW] Question {question.id} already has flashcard {existing.id}")
        return existing

    flashcard = Flashcard(
        id=str(uuid.uuid4()),
        user_id=user_id,
        question_id=question.id,
        material_id=question.material_id,
        front=question.question,
        back=question.answer,
        difficulty=question.difficulty,
        interval_days=INITIAL_INTERVAL_DAYS,
        ease_factor=INITIAL_EASE_FACTOR,
        repetitions=0,
        last_reviewed=None,
        next_review=now + timedelta(days=INITIAL_INTERVAL_DAYS),
        created_at=now,
    )
    db.add(flashcard)
    print(f"[REVIEW] Created flashcard {flashcard.id} for question {question.id}")
    return flashcard


def review_flashcard(
    db: Session,
    flashcard_id: str,
    quality: int,
    user_id: str = DEMO_USER_ID,
    now: Optional[datetime] = None
) -> Flashcard:
    """
    Apply a quality rating to a flashcard.

    Steps:
    1. Load the flashcard (row locked where the database supports it)
    2. Compute the new schedule from its current state
    3. Write the result, stamp last_reviewed and log a Review
    4. Commit, or roll back and re-raise on failure

    Args:
        db: Database session
        flashcard_id: ID of the flashcard being reviewed
        quality: Rating 1 (Again) to 4 (Easy)
        user_id: Owner of the flashcard
        now: Current datetime

    Returns:
        The updated Flashcard
    """
    if now is None:
        now = datetime.utcnow()

    flashcard = db.query(Flashcard).filter(
        Flashcard.id == flashcard_id,
        Flashcard.user_id == user_id
    ).with_for_update().first()
    if not flashcard:
        raise NotFoundError(f"Flashcard {flashcard_id} not found")

    result = schedule(quality, {
        "interval_days": flashcard.interval_days,
        "ease_factor": flashcard.ease_factor,
        "repetitions": flashcard.repetitions,
    }, now)

    try:
        flashcard.interval_days = result["interval_days"]
        flashcard.ease_factor = result["ease_factor"]
        flashcard.repetitions = result["repetitions"]
        flashcard.next_review = result["next_review"]
        flashcard.last_reviewed = now

        db.add(Review(
            id=str(uuid.uuid4()),
            user_id=user_id,
            flashcard_id=flashcard.id,
            quality=quality,
            interval_days=result["interval_days"],
            ease_factor=result["ease_factor"],
            reviewed_at=now,
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"[REVIEW ERROR] Failed to save review for flashcard {flashcard_id}: {e}")
        raise

    db.refresh(flashcard)
    print(f"[REVIEW] Flashcard {flashcard_id} rated {quality}: next review in {result['interval_days']} day(s)")
    return flashcard
