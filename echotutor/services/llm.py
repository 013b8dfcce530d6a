import os
import json
from pathlib import Path
from typing import List, Dict
from dotenv import load_dotenv
from langchain_openai import ChatOpenAI
from echotutor.models import Difficulty

# Ensure .env is loaded
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

MIN_QUESTIONS = 5
MAX_QUESTIONS = 15
MODEL_NAME = os.getenv("ECHOTUTOR_MODEL", "gpt-3.5-turbo")

# Initialize OpenAI LLM
api_key = os.getenv("OPENAI_API_KEY")
if not api_key:
    print("[LLM WARNING] No OPENAI_API_KEY found in environment")
    llm = None
else:
    print(f"[LLM] OpenAI API key loaded successfully")
    llm = ChatOpenAI(model=MODEL_NAME, temperature=0.7, api_key=api_key)


def _build_prompt(text_excerpt: str, count: int) -> str:
    return f"""You are an expert educational content creator. Generate {count} high-quality study questions based on the following content.

Each answer will be guessed letter by letter, so:
- The ANSWER must be a single word or a short term (at most 3 words, letters only)
- The QUESTION must make the answer unambiguous

For EACH question provide:
1. "question": the question text
2. "answer": the correct answer
3. "difficulty": easy, medium, or hard
4. "topic": the main topic or concept (2-4 words)
5. "explanation": brief explanation of why this answer is correct

Content to analyze:
{text_excerpt}

Return ONLY a valid JSON array with NO additional text. Format:
[
  {{"question": "Which organelle produces most of a cell's ATP?", "answer": "Mitochondria", "difficulty": "easy", "topic": "Cell Energy", "explanation": "Mitochondria carry out cellular respiration."}}
]

Generate exactly {count} questions with a good mix of difficulty levels.
"""


def parse_questions(response_text: str) -> List[Dict]:
    """
    Extract and validate the question list from a model reply.

    Items without a question or answer are dropped; unknown difficulties
    become "medium".
    """
    start_idx = response_text.find('[')
    end_idx = response_text.rfind(']') + 1
    if start_idx == -1 or end_idx <= start_idx:
        print(f"[LLM] Could not find JSON array in response")
        return []

    try:
        items = json.loads(response_text[start_idx:end_idx])
    except json.JSONDecodeError as e:
        print(f"[LLM] Failed to parse JSON response: {e}")
        return []

    valid_difficulties = {d.value for d in Difficulty}
    questions = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        question = str(item.get('question') or '').strip()
        answer = str(item.get('answer') or '').strip()
        if not question or not answer:
            continue
        difficulty = str(item.get('difficulty') or 'medium').strip().lower()
        if difficulty not in valid_difficulties:
            difficulty = 'medium'
        questions.append({
            'question': question,
            'answer': answer,
            'difficulty': difficulty,
            'topic': str(item.get('topic') or f'Concept {i+1}').strip()[:50],
            'explanation': str(item.get('explanation') or '').strip(),
        })
    return questions


def generate_questions_from_text(text: str, count: int = 10) -> List[Dict]:
    """
    Use AI to generate study questions with short, guessable answers.

    Args:
        text: The study material to analyze
        count: Number of questions wanted (clamped to 5-15)

    Returns:
        List of dicts with 'question', 'answer', 'difficulty', 'topic' and 'explanation'
    """
    if not llm:
        print("[LLM] OpenAI API not configured, skipping question generation")
        return []

    if not text or len(text.strip()) < 100:
        print("[LLM] Text too short for AI analysis")
        return []

    count = max(MIN_QUESTIONS, min(MAX_QUESTIONS, count))

    # Truncate text to avoid token limits (keep first 4000 chars)
    prompt = _build_prompt(text[:4000], count)

    print(f"[LLM] Generating {count} questions using {MODEL_NAME}...")
    response = llm.invoke(prompt)
    questions = parse_questions(response.content.strip())[:count]

    print(f"[LLM] Successfully generated {len(questions)} questions")
    return questions
