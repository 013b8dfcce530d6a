import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, Integer, Boolean, ForeignKey, Enum, Text, JSON
from sqlalchemy.orm import relationship
from echotutor.database import Base


class Difficulty(str, enum.Enum):
    """Difficulty label assigned to a generated question."""
    easy = "easy"
    medium = "medium"
    hard = "hard"


class LetterState(str, enum.Enum):
    """Feedback state of a single tile in a guess row."""
    correct = "correct"
    present = "present"
    absent = "absent"
    empty = "empty"


class GameState(str, enum.Enum):
    """Outcome state of a game session."""
    playing = "playing"
    won = "won"
    lost = "lost"


class StudyMaterial(Base):
    """Text a learner uploaded to generate questions from."""
    __tablename__ = "study_materials"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    # "text" or "pdf"
    file_type = Column(String, nullable=False, default="text")
    created_at = Column(DateTime, default=datetime.utcnow)

    questions = relationship("Question", back_populates="material", cascade="all, delete-orphan")


class Question(Base):
    """Generated study question. Never edited after generation."""
    __tablename__ = "questions"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    material_id = Column(String, ForeignKey("study_materials.id"), nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    difficulty = Column(Enum(Difficulty), nullable=False, default=Difficulty.medium)
    topic = Column(String, nullable=True)
    explanation = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    material = relationship("StudyMaterial", back_populates="questions")


class GameSession(Base):
    """One play-through of a question."""
    __tablename__ = "game_sessions"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)
    material_id = Column(String, ForeignKey("study_materials.id"), nullable=False)
    # Canonical guesses in submission order
    guesses = Column(JSON, nullable=False, default=list)
    state = Column(Enum(GameState), nullable=False, default=GameState.playing)
    # Set only once the session is terminal
    completed = Column(Boolean, nullable=True)
    attempts_used = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    finished_at = Column(DateTime, nullable=True)

    question = relationship("Question")


class Flashcard(Base):
    """Flashcard created from a won game, scheduled with SM-2."""
    __tablename__ = "flashcards"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)
    material_id = Column(String, ForeignKey("study_materials.id"), nullable=False)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    difficulty = Column(Enum(Difficulty), nullable=False, default=Difficulty.medium)

    interval_days = Column(Integer, default=1)
    ease_factor = Column(Float, default=2.5)
    repetitions = Column(Integer, default=0)
    last_reviewed = Column(DateTime, nullable=True)
    next_review = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    material = relationship("StudyMaterial")

    @property
    def material_title(self):
        """Title of the study material the card came from."""
        return self.material.title if self.material else None


class Review(Base):
    """Review model for tracking flashcard review history."""
    __tablename__ = "reviews"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    flashcard_id = Column(String, ForeignKey("flashcards.id"), nullable=False)
    quality = Column(Integer, nullable=False)  # 1-4
    interval_days = Column(Integer, nullable=False)
    ease_factor = Column(Float, nullable=False)
    reviewed_at = Column(DateTime, default=datetime.utcnow)
