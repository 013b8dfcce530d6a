from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from echotutor.models import Flashcard, Review
from echotutor.services.errors import InvalidInput, NotFoundError
from echotutor.services.review import (
    create_flashcard_for_question, get_due_flashcards, review_flashcard, select_due
)

NOW = datetime(2026, 3, 1, 9, 30)


def card(name, due_in_hours):
    return SimpleNamespace(name=name, next_review=NOW + timedelta(hours=due_in_hours))


def test_select_due_filters_and_orders():
    cards = [card("later", 5), card("old", -48), card("now", 0), card("recent", -1)]
    due = select_due(cards, NOW)
    assert [c.name for c in due] == ["old", "recent", "now"]


def test_select_due_keeps_insertion_order_on_ties():
    cards = [card("b", -2), card("a", -2), card("c", -3)]
    assert [c.name for c in select_due(cards, NOW)] == ["c", "b", "a"]


def test_select_due_empty():
    assert select_due([], NOW) == []
    assert select_due([card("future", 1)], NOW) == []


@pytest.fixture
def flashcard(db, make_question):
    question = make_question(answer="Nucleus")
    created = create_flashcard_for_question(db, question, NOW)
    db.commit()
    return created


def test_review_applies_schedule(db, flashcard):
    reviewed_at = NOW + timedelta(days=1)
    updated = review_flashcard(db, flashcard.id, 3, now=reviewed_at)

    assert updated.repetitions == 1
    assert updated.interval_days == 1
    assert updated.ease_factor == pytest.approx(2.36)
    assert updated.last_reviewed == reviewed_at
    assert updated.next_review == reviewed_at + timedelta(days=1)

    review = db.query(Review).one()
    assert review.flashcard_id == flashcard.id
    assert review.quality == 3
    assert review.interval_days == 1


def test_review_sequence_grows_interval(db, flashcard):
    review_flashcard(db, flashcard.id, 4, now=NOW)
    review_flashcard(db, flashcard.id, 4, now=NOW)
    updated = review_flashcard(db, flashcard.id, 4, now=NOW)

    assert updated.repetitions == 3
    assert updated.interval_days == 15
    assert db.query(Review).count() == 3


def test_failed_review_resets(db, flashcard):
    review_flashcard(db, flashcard.id, 4, now=NOW)
    review_flashcard(db, flashcard.id, 4, now=NOW)
    updated = review_flashcard(db, flashcard.id, 1, now=NOW)

    assert updated.repetitions == 0
    assert updated.interval_days == 1


def test_invalid_quality_leaves_card_untouched(db, flashcard):
    with pytest.raises(InvalidInput):
        review_flashcard(db, flashcard.id, 5, now=NOW)

    stored = db.query(Flashcard).filter(Flashcard.id == flashcard.id).one()
    assert stored.repetitions == 0
    assert stored.last_reviewed is None
    assert db.query(Review).count() == 0


def test_failed_commit_applies_nothing(db, flashcard, monkeypatch):
    def broken_commit():
        raise RuntimeError("disk I/O error")

    with monkeypatch.context() as m:
        m.setattr(db, "commit", broken_commit)
        with pytest.raises(RuntimeError):
            review_flashcard(db, flashcard.id, 4, now=NOW)

    stored = db.query(Flashcard).filter(Flashcard.id == flashcard.id).one()
    assert stored.repetitions == 0
    assert stored.last_reviewed is None
    assert db.query(Review).count() == 0


def test_review_unknown_flashcard(db):
    with pytest.raises(NotFoundError):
        review_flashcard(db, "missing", 3, now=NOW)


def test_get_due_flashcards(db, make_question):
    first = create_flashcard_for_question(db, make_question(answer="Nucleus"), NOW)
    second = create_flashcard_for_question(db, make_question(answer="Ribosome"), NOW - timedelta(days=3))
    db.commit()

    assert get_due_flashcards(db, NOW - timedelta(days=3)) == []
    assert [c.id for c in get_due_flashcards(db, NOW)] == [second.id]

    due = get_due_flashcards(db, NOW + timedelta(days=1))
    assert [c.id for c in due] == [second.id, first.id]
