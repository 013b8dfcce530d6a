"""Service for storing study materials and generating questions from them."""
import uuid
from typing import List

import fitz  # PyMuPDF
from fastapi import UploadFile
from sqlalchemy.orm import Session

from echotutor.models import Difficulty, Question, StudyMaterial
from echotutor.services.errors import NotFoundError, QuestionGenerationError
from echotutor.services.llm import generate_questions_from_text
from echotutor.services.review import DEMO_USER_ID


def create_material(
    db: Session,
    title: str,
    content: str,
    file_type: str = "text",
    user_id: str = DEMO_USER_ID
) -> StudyMaterial:
    """Store a study material. Title and content must not be blank."""
    title = (title or "").strip()
    content = (content or "").strip()
    if not title or not content:
        raise ValueError("Title and content are required")

    material = StudyMaterial(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        content=content,
        file_type=file_type,
    )
    db.add(material)
    db.commit()
    db.refresh(material)

    print(f"[INGEST] Stored material '{title}' ({len(content)} chars, {file_type})")
    return material


def _extract_pdf_text(data: bytes) -> str:
    try:
        pdf_document = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        print(f"[INGEST ERROR] Failed to open PDF: {e}")
        raise ValueError(f"Invalid PDF file: {str(e)}")

    full_text = ""
    try:
        for page_num in range(pdf_document.page_count):
            page = pdf_document[page_num]
            full_text += page.get_text()
    finally:
        pdf_document.close()
    return full_text


def process_upload(file: UploadFile, db: Session, user_id: str = DEMO_USER_ID) -> StudyMaterial:
    """
    Create a study material from an uploaded .txt or .pdf file.

    The file name without extension becomes the title.
    """
    filename = file.filename or "Untitled Material"
    lower_name = filename.lower()

    data = file.file.read()
    if not data:
        raise ValueError("Empty file uploaded")

    if lower_name.endswith(".pdf"):
        content = _extract_pdf_text(data)
        file_type = "pdf"
    elif lower_name.endswith(".txt"):
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError:
            raise ValueError("Text files must be UTF-8 encoded")
        file_type = "text"
    else:
        raise ValueError("Unsupported file type. Please upload PDF or TXT files.")

    title = filename.rsplit(".", 1)[0]
    return create_material(db, title, content, file_type=file_type, user_id=user_id)


def get_material(db: Session, material_id: str, user_id: str = DEMO_USER_ID) -> StudyMaterial:
    material = db.query(StudyMaterial).filter(
        StudyMaterial.id == material_id,
        StudyMaterial.user_id == user_id
    ).first()
    if not material:
        raise NotFoundError(f"Study material {material_id} not found")
    return material


def list_materials(db: Session, user_id: str = DEMO_USER_ID) -> List[StudyMaterial]:
    return db.query(StudyMaterial).filter(
        StudyMaterial.user_id == user_id
    ).order_by(StudyMaterial.created_at.desc()).all()


def list_questions(db: Session, material_id: str, user_id: str = DEMO_USER_ID) -> List[Question]:
    get_material(db, material_id, user_id)
    return db.query(Question).filter(
        Question.material_id == material_id,
        Question.user_id == user_id
    ).order_by(Question.created_at.desc()).all()


def generate_questions(
    db: Session,
    material_id: str,
    count: int = 10,
    user_id: str = DEMO_USER_ID
) -> List[Question]:
    """
    Generate questions for a material and store them.

    Raises:
        NotFoundError: material does not exist
        QuestionGenerationError: the model call failed or returned nothing usable
    """
    material = get_material(db, material_id, user_id)

    try:
        generated = generate_questions_from_text(material.content, count)
    except Exception as e:
        print(f"[INGEST ERROR] Question generation failed for material {material_id}: {e}")
        raise QuestionGenerationError(f"Failed to generate questions: {str(e)}") from e

    if not generated:
        raise QuestionGenerationError("No questions could be generated from this material")

    questions = [
        Question(
            id=str(uuid.uuid4()),
            user_id=user_id,
            material_id=material.id,
            question=item["question"],
            answer=item["answer"],
            difficulty=Difficulty(item["difficulty"]),
            topic=item["topic"],
            explanation=item["explanation"],
        )
        for item in generated
    ]
    try:
        db.add_all(questions)
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"[INGEST ERROR] Failed to save questions for material {material_id}: {e}")
        raise

    print(f"[INGEST] Saved {len(questions)} questions for material '{material.title}'")
    return questions
