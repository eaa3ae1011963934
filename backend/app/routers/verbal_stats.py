"""
Verbal Stats Router

Answer submission (which drives the ability update) and answer history.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import get_user_token
from app.schemas.verbal import (
    AbilityResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    VerbalStatResponse,
    WordResponse,
)
from app.services.errors import VerbalEngineError
from app.services.verbal_stats import get_stats_for_user, question_category, record_answer
from app.utils.http_errors import to_http_exception

router = APIRouter(prefix="/api/verbal-stats", tags=["verbal-stats"])


@router.post("", response_model=SubmitAnswerResponse, status_code=status.HTTP_201_CREATED)
def submit_answer(
    request: SubmitAnswerRequest,
    token: str = Depends(get_user_token),
    db: Session = Depends(get_db)
):
    """Record an answer and update the user's ability for its category."""
    try:
        stat, profile = record_answer(
            db,
            token,
            request.question_id,
            request.answers,
            correct=request.correct,
            duration=request.duration,
        )
        category = question_category(stat.question)
    except VerbalEngineError as e:
        raise to_http_exception(e)

    return SubmitAnswerResponse(
        id=stat.id,
        question_id=stat.question_id,
        correct=stat.correct,
        category=category.key,
        score=profile.scores[category.index],
        ability=AbilityResponse.from_profile(profile),
    )


@router.get("", response_model=List[VerbalStatResponse])
def list_my_stats(token: str = Depends(get_user_token), db: Session = Depends(get_db)):
    """Answer history, newest first, with question metadata and vocabulary."""
    try:
        stats = get_stats_for_user(db, token)
    except VerbalEngineError as e:
        raise to_http_exception(e)

    return [
        VerbalStatResponse(
            id=stat.id,
            question_id=stat.question_id,
            correct=stat.correct,
            answers=stat.answers or [],
            duration=stat.duration,
            date=stat.date,
            competence=stat.question.competence,
            framed_as=stat.question.framed_as,
            type=stat.question.type,
            difficulty=stat.question.difficulty,
            vocabulary=[WordResponse.model_validate(w) for w in stat.question.vocabulary],
        )
        for stat in stats
    ]
