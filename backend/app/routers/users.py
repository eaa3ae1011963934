from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies.auth import get_current_user, get_user_token
from app.models.enums import AbilityProfile
from app.models.models import User
from app.schemas.verbal import AbilityResponse, IdList, UserCreate, UserResponse, WordResponse
from app.services.errors import VerbalEngineError
from app.services.users import (
    add_marked_questions,
    add_marked_words,
    create_user,
    get_marked_question_ids,
    get_marked_words,
    get_problematic_words,
    remove_marked_questions,
    remove_marked_words,
)
from app.utils.http_errors import to_http_exception

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    request: UserCreate,
    token: str = Depends(get_user_token),
    db: Session = Depends(get_db)
):
    """Register the authenticated subject as a user."""
    try:
        return create_user(db, token, request.email)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/ability", response_model=AbilityResponse)
def get_my_ability(current_user: User = Depends(get_current_user)):
    """Per-category ability scores and attempt counts."""
    profile = AbilityProfile.from_storage(current_user.verbal_ability, current_user.verbal_ability_count)
    return AbilityResponse.from_profile(profile)


@router.get("/me/marked-words", response_model=List[WordResponse])
def list_marked_words(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return get_marked_words(db, current_user.token)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.post("/me/marked-words", status_code=status.HTTP_204_NO_CONTENT)
def mark_words(request: IdList, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        add_marked_words(db, current_user.token, request.ids)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.delete("/me/marked-words", status_code=status.HTTP_204_NO_CONTENT)
def unmark_words(request: IdList, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        remove_marked_words(db, current_user.token, request.ids)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/me/marked-questions", response_model=List[int])
def list_marked_questions(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return get_marked_question_ids(db, current_user.token)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.post("/me/marked-questions", status_code=status.HTTP_204_NO_CONTENT)
def mark_questions(request: IdList, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        add_marked_questions(db, current_user.token, request.ids)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.delete("/me/marked-questions", status_code=status.HTTP_204_NO_CONTENT)
def unmark_questions(request: IdList, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        remove_marked_questions(db, current_user.token, request.ids)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/me/problematic-words", response_model=List[WordResponse])
def list_problematic_words(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Vocabulary from questions the user got wrong."""
    try:
        return get_problematic_words(db, current_user.token)
    except VerbalEngineError as e:
        raise to_http_exception(e)
