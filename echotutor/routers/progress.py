"""Router for learner progress on the dashboard."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from echotutor.database import get_db
from echotutor.services.progress import dashboard_stats

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db)):
    """
    Get overall study statistics.

    Returns:
        - total_materials, total_questions, total_flashcards, due_flashcards
        - games_played, games_won, win_rate (percent)
        - recent_activity: the last finished games
    """
    return dashboard_stats(db)
