"""Router for study materials and question generation."""
from typing import List
from fastapi import APIRouter, Depends, File, UploadFile, HTTPException
from sqlalchemy.orm import Session
from echotutor.database import get_db
from echotutor.schemas import (
    MaterialCreate, MaterialOut, QuestionOut, GenerateQuestionsRequest, GenerateQuestionsResponse
)
from echotutor.services.errors import NotFoundError, QuestionGenerationError
from echotutor.services.ingest import (
    create_material, process_upload, list_materials, list_questions, generate_questions
)

router = APIRouter(prefix="/materials", tags=["materials"])


@router.post("", response_model=MaterialOut)
def create(material: MaterialCreate, db: Session = Depends(get_db)):
    """Store pasted study material."""
    try:
        return create_material(db, material.title, material.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/upload", response_model=MaterialOut)
def upload(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """
    Upload a PDF or TXT file as study material.

    Returns:
        The stored material
    """
    if not file.filename or not file.filename.lower().endswith(('.pdf', '.txt')):
        raise HTTPException(status_code=400, detail="Please upload a PDF or TXT file")

    try:
        return process_upload(file, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[MaterialOut])
def get_materials(db: Session = Depends(get_db)):
    """List study materials, newest first."""
    return list_materials(db)


@router.get("/{material_id}/questions", response_model=List[QuestionOut])
def get_questions(material_id: str, db: Session = Depends(get_db)):
    """List the questions generated for a material."""
    try:
        return list_questions(db, material_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{material_id}/generate-questions", response_model=GenerateQuestionsResponse)
def generate(
    material_id: str,
    request: GenerateQuestionsRequest = GenerateQuestionsRequest(),
    db: Session = Depends(get_db)
):
    """
    Generate study questions from a material with the language model.

    Returns:
        The new questions and how many were created
    """
    try:
        questions = generate_questions(db, material_id, request.question_count)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QuestionGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return GenerateQuestionsResponse(
        questions=[QuestionOut.model_validate(q) for q in questions],
        count=len(questions)
    )
