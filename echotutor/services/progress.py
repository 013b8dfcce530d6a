"""Service for dashboard and flashcard deck statistics."""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from echotutor.models import Flashcard, GameSession, GameState, Question, StudyMaterial
from echotutor.services.review import DEMO_USER_ID, select_due

RECENT_ACTIVITY_LIMIT = 10


def flashcard_stats(db: Session, now: Optional[datetime] = None, user_id: str = DEMO_USER_ID) -> dict:
    """
    Counters shown above the review deck.

    Returns:
        - total_cards: all flashcards of the user
        - due_cards: cards with next_review <= now
        - completed_today: cards last reviewed on the same calendar day as now
    """
    if now is None:
        now = datetime.utcnow()

    flashcards = db.query(Flashcard).filter(Flashcard.user_id == user_id).all()
    completed_today = [
        card for card in flashcards
        if card.last_reviewed and card.last_reviewed.date() == now.date()
    ]

    return {
        "total_cards": len(flashcards),
        "due_cards": len(select_due(flashcards, now)),
        "completed_today": len(completed_today),
    }


def dashboard_stats(db: Session, now: Optional[datetime] = None, user_id: str = DEMO_USER_ID) -> dict:
    """
    Aggregate counters and recent games for the dashboard.

    Only finished sessions count as games played.
    """
    if now is None:
        now = datetime.utcnow()

    total_materials = db.query(StudyMaterial).filter(StudyMaterial.user_id == user_id).count()
    total_questions = db.query(Question).filter(Question.user_id == user_id).count()
    deck = flashcard_stats(db, now, user_id)

    finished_query = db.query(GameSession).filter(
        GameSession.user_id == user_id,
        GameSession.state != GameState.playing
    )
    games_played = finished_query.count()
    games_won = finished_query.filter(GameSession.state == GameState.won).count()
    win_rate = round(games_won / games_played * 100) if games_played else 0

    recent = finished_query.order_by(GameSession.finished_at.desc()).limit(RECENT_ACTIVITY_LIMIT).all()
    recent_activity = [
        {
            "session_id": s.id,
            "question_id": s.question_id,
            "question": s.question.question,
            "completed": bool(s.completed),
            "attempts_used": s.attempts_used,
            "finished_at": s.finished_at,
        }
        for s in recent
    ]

    return {
        "total_materials": total_materials,
        "total_questions": total_questions,
        "total_flashcards": deck["total_cards"],
        "due_flashcards": deck["due_cards"],
        "games_played": games_played,
        "games_won": games_won,
        "win_rate": win_rate,
        "recent_activity": recent_activity,
    }
