"""
Verbal Questions Router

Question creation (with vocabulary tagging), lookups, random practice sets
and the adaptive question feed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import get_user_token
from app.schemas.verbal import (
    AdaptiveQuestionsResponse,
    RandomQuestionsRequest,
    VerbalQuestionCreate,
    VerbalQuestionResponse,
)
from app.services.adaptive import get_adaptive_questions
from app.services.errors import VerbalEngineError
from app.services.lemmatizer import Lemmatizer, get_lemmatizer
from app.services.verbal_questions import (
    create_question,
    get_question,
    get_questions_by_ids,
    get_questions_on_vocab,
    get_random_questions,
)
from app.utils.http_errors import to_http_exception

router = APIRouter(prefix="/api/verbal-questions", tags=["verbal-questions"])


def parse_id_list(raw: Optional[str]) -> List[int]:
    """Parse "1,2,3" or "[1,2,3]" into ints; blank input is an empty list."""
    if not raw:
        return []
    parts = [part.strip() for part in raw.strip().strip("[]").split(",")]
    try:
        return [int(part) for part in parts if part]
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid id list: {raw}")


@router.post("", response_model=VerbalQuestionResponse, status_code=status.HTTP_201_CREATED)
def create_verbal_question(
    request: VerbalQuestionCreate,
    db: Session = Depends(get_db),
    lemmatizer: Lemmatizer = Depends(get_lemmatizer)
):
    """
    Create a question and tag it with the vocabulary words it exercises.

    Every word in `vocabulary` must already exist (by base form).
    """
    try:
        question = create_question(db, request.model_dump(mode="json"), lemmatizer)
    except VerbalEngineError as e:
        raise to_http_exception(e)
    return question


@router.get("/adaptive", response_model=AdaptiveQuestionsResponse)
def adaptive_questions(
    count: int = Query(5, ge=0),
    exclude: Optional[str] = Query(None, description="Question ids already shown, e.g. 1,2,3"),
    token: str = Depends(get_user_token),
    db: Session = Depends(get_db)
):
    """
    Get up to `count` questions chosen for the user's weakest categories.

    A short or empty list is a normal result (the bank ran out of unseen
    questions for the picked categories), not an error.
    """
    exclude_ids = parse_id_list(exclude)
    try:
        batch = get_adaptive_questions(db, token, count, exclude_ids)
    except VerbalEngineError as e:
        raise to_http_exception(e)

    return AdaptiveQuestionsResponse(
        requested=batch.requested,
        resolved=len(batch.questions),
        questions=[VerbalQuestionResponse.model_validate(q) for q in batch.questions],
    )


@router.get("/on-vocab", response_model=List[VerbalQuestionResponse])
def questions_on_vocab(
    words: str = Query(..., description="Word ids, e.g. 4,8"),
    exclude: Optional[str] = None,
    token: str = Depends(get_user_token),
    db: Session = Depends(get_db)
):
    """Up to 5 questions exercising any of the given vocabulary words."""
    try:
        return get_questions_on_vocab(db, parse_id_list(words), parse_id_list(exclude))
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.post("/random", response_model=List[VerbalQuestionResponse])
def random_questions(
    request: RandomQuestionsRequest,
    db: Session = Depends(get_db)
):
    """Random practice set with optional type/competence/framing/difficulty filters."""
    try:
        return get_random_questions(
            db,
            limit=request.limit,
            question_type=request.type.value if request.type else None,
            competence=request.competence.value if request.competence else None,
            framed_as=request.framed_as.value if request.framed_as else None,
            difficulty=request.difficulty.value if request.difficulty else None,
            exclude_ids=request.exclude,
        )
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[VerbalQuestionResponse])
def list_questions_by_ids(
    ids: str = Query(..., description="Question ids, e.g. 31,63"),
    db: Session = Depends(get_db)
):
    try:
        return get_questions_by_ids(db, parse_id_list(ids))
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/{question_id}", response_model=VerbalQuestionResponse)
def get_verbal_question(question_id: int, db: Session = Depends(get_db)):
    try:
        return get_question(db, question_id)
    except VerbalEngineError as e:
        raise to_http_exception(e)
