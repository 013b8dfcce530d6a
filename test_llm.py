import json
from types import SimpleNamespace

from echotutor.services import llm as llm_service
from echotutor.services.llm import generate_questions_from_text, parse_questions

MATERIAL = (
    "Cells are the basic unit of life. The nucleus stores DNA, mitochondria produce ATP "
    "and ribosomes assemble proteins from amino acids."
)


class FakeLLM:
    def __init__(self, content):
        self.content = content
        self.prompts = []

    def invoke(self, prompt):
        self.prompts.append(prompt)
        return SimpleNamespace(content=self.content)


def test_parse_questions_from_wrapped_reply():
    reply = 'Here you go:\n[{"question": "Q1?", "answer": "Nucleus", "difficulty": "Easy", ' \
            '"topic": "Cells", "explanation": "Stores DNA."}]\nGood luck!'
    questions = parse_questions(reply)

    assert questions == [{
        "question": "Q1?",
        "answer": "Nucleus",
        "difficulty": "easy",
        "topic": "Cells",
        "explanation": "Stores DNA.",
    }]


def test_parse_questions_drops_incomplete_items():
    reply = json.dumps([
        {"question": "Q1?", "answer": ""},
        {"answer": "Orphan"},
        "not a dict",
        {"question": "Q2?", "answer": "ATP", "difficulty": "impossible", "topic": "x" * 80},
    ])
    questions = parse_questions(reply)

    assert len(questions) == 1
    assert questions[0]["difficulty"] == "medium"
    assert len(questions[0]["topic"]) == 50
    assert questions[0]["explanation"] == ""


def test_parse_questions_default_topic():
    questions = parse_questions('[{"question": "Q?", "answer": "ATP"}]')
    assert questions[0]["topic"] == "Concept 1"


def test_parse_questions_rejects_non_json():
    assert parse_questions("no array here") == []
    assert parse_questions("[not json]") == []


def test_generate_without_llm(monkeypatch):
    monkeypatch.setattr(llm_service, "llm", None)
    assert generate_questions_from_text(MATERIAL) == []


def test_generate_with_short_text(monkeypatch):
    fake = FakeLLM("[]")
    monkeypatch.setattr(llm_service, "llm", fake)

    assert generate_questions_from_text("too short") == []
    assert fake.prompts == []


def test_generate_clamps_count(monkeypatch):
    fake = FakeLLM('[{"question": "Q?", "answer": "ATP", "difficulty": "hard", "topic": "Energy"}]')
    monkeypatch.setattr(llm_service, "llm", fake)

    questions = generate_questions_from_text(MATERIAL, count=50)

    assert len(questions) == 1
    assert "Generate exactly 15 questions" in fake.prompts[0]
    assert MATERIAL in fake.prompts[0]


def test_generate_keeps_requested_count(monkeypatch):
    items = [{"question": f"Q{i}?", "answer": "ATP"} for i in range(40)]
    fake = FakeLLM(json.dumps(items))
    monkeypatch.setattr(llm_service, "llm", fake)

    questions = generate_questions_from_text(MATERIAL, count=8)

    assert len(questions) == 8
    assert [q["question"] for q in questions] == [f"Q{i}?" for i in range(8)]
