from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from echotutor.database import get_db
from echotutor.schemas import FlashcardOut, ReviewRequest
from echotutor.services.errors import InvalidInput, NotFoundError
from echotutor.services.progress import flashcard_stats
from echotutor.services.review import get_due_flashcards, review_flashcard

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


@router.get("/due", response_model=List[FlashcardOut])
def due(db: Session = Depends(get_db)):
    """Get flashcards due for review, earliest first."""
    return get_due_flashcards(db)


@router.get("/stats")
def stats(db: Session = Depends(get_db)):
    """Get total, due and reviewed-today counts for the deck."""
    return flashcard_stats(db)


@router.post("/{flashcard_id}/review", response_model=FlashcardOut)
def review(flashcard_id: str, review_request: ReviewRequest, db: Session = Depends(get_db)):
    """
    Rate how well a flashcard was recalled and reschedule it.

    Quality: 1=Again, 2=Hard, 3=Good, 4=Easy.
    """
    try:
        return review_flashcard(db, flashcard_id, review_request.quality)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
