from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from echotutor.models import Difficulty


class MaterialCreate(BaseModel):
    """Schema for pasted study material."""
    title: str
    content: str


class MaterialOut(BaseModel):
    """Schema for study material output."""
    id: str
    title: str
    content: str
    file_type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionOut(BaseModel):
    """Schema for question output. The answer stays hidden until a game ends."""
    id: str
    material_id: str
    question: str
    difficulty: Difficulty
    topic: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GenerateQuestionsRequest(BaseModel):
    """Schema for a question generation request."""
    question_count: int = Field(default=10, ge=5, le=15)


class GenerateQuestionsResponse(BaseModel):
    questions: List[QuestionOut]
    count: int


class StartGameRequest(BaseModel):
    question_id: str


class Tile(BaseModel):
    letter: str
    state: str


class GameSessionOut(BaseModel):
    """Schema for the state of a game session."""
    session_id: str
    question_id: str
    question: str
    topic: Optional[str] = None
    difficulty: str
    state: str
    attempts_used: int
    max_guesses: int
    answer_length: int
    board: List[List[Tile]]
    # Only filled in once the game is won or lost
    answer: Optional[str] = None
    explanation: Optional[str] = None


class GuessRequest(BaseModel):
    guess: str


class GuessResponse(GameSessionOut):
    """Schema for the result of a single guess."""
    tiles: List[Tile]
    flashcard_id: Optional[str] = None


class FlashcardOut(BaseModel):
    """Schema for flashcard output."""
    id: str
    question_id: str
    material_id: str
    material_title: Optional[str] = None
    front: str
    back: str
    difficulty: Difficulty
    interval_days: int
    ease_factor: float
    repetitions: int
    last_reviewed: Optional[datetime] = None
    next_review: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewRequest(BaseModel):
    """Schema for a review rating: 1=Again, 2=Hard, 3=Good, 4=Easy."""
    # Strict: JSON true, 3.0 and "3" are not ratings
    quality: StrictInt
