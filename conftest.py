import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from echotutor import models
from echotutor.database import Base, get_db
from echotutor.main import app
from echotutor.services.review import DEMO_USER_ID


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_question(db):
    """Factory storing a material and a question with the given answer."""
    def _make(answer="Mitochondria", question="Which organelle produces most of a cell's ATP?",
              difficulty=models.Difficulty.easy):
        material = models.StudyMaterial(
            id=str(uuid.uuid4()),
            user_id=DEMO_USER_ID,
            title="Cell Biology",
            content="Mitochondria produce ATP.",
            file_type="text",
        )
        q = models.Question(
            id=str(uuid.uuid4()),
            user_id=DEMO_USER_ID,
            material_id=material.id,
            question=question,
            answer=answer,
            difficulty=difficulty,
            topic="Cell Energy",
            explanation="Mitochondria carry out cellular respiration.",
        )
        db.add_all([material, q])
        db.commit()
        return q

    return _make
