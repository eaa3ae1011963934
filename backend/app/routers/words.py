from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.verbal import MarkWordsRequest, WordCreate, WordResponse
from app.services.errors import VerbalEngineError
from app.services.lemmatizer import Lemmatizer, get_lemmatizer
from app.services.words import (
    create_word,
    get_word,
    get_word_by_text,
    list_marked_words,
    list_words,
    set_words_marked,
)
from app.utils.http_errors import to_http_exception

router = APIRouter(prefix="/api/words", tags=["words"])


@router.post("", response_model=WordResponse, status_code=status.HTTP_201_CREATED)
def add_word(
    request: WordCreate,
    db: Session = Depends(get_db),
    lemmatizer: Lemmatizer = Depends(get_lemmatizer)
):
    """Store a vocabulary word under its base form."""
    try:
        return create_word(db, request.model_dump(), lemmatizer)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[WordResponse])
def get_words(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    try:
        return list_words(db, offset, limit)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.patch("/marked", response_model=List[WordResponse])
def mark_words(
    request: MarkWordsRequest,
    db: Session = Depends(get_db),
    lemmatizer: Lemmatizer = Depends(get_lemmatizer)
):
    """Flag (or unflag) words for everyone. Returns the words that were updated."""
    try:
        return set_words_marked(db, request.words, lemmatizer, request.marked)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/marked", response_model=List[WordResponse])
def get_marked_words(db: Session = Depends(get_db)):
    try:
        return list_marked_words(db)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/lookup/{text}", response_model=WordResponse)
def lookup_word(
    text: str,
    db: Session = Depends(get_db),
    lemmatizer: Lemmatizer = Depends(get_lemmatizer)
):
    """Find a word by any of its inflections."""
    try:
        return get_word_by_text(db, text, lemmatizer)
    except VerbalEngineError as e:
        raise to_http_exception(e)


@router.get("/{word_id}", response_model=WordResponse)
def get_word_by_id(word_id: int, db: Session = Depends(get_db)):
    try:
        return get_word(db, word_id)
    except VerbalEngineError as e:
        raise to_http_exception(e)
