"""
Vocabulary words. Words are stored under their lemmatized base form, so
"ameliorated" and "ameliorate" are the same entry.
"""

import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.models import Word
from app.services.errors import InvalidInputError, NotFoundError, StorageError
from app.services.lemmatizer import Lemmatizer

logger = logging.getLogger(__name__)


def create_word(db: Session, data: Dict[str, Any], lemmatizer: Lemmatizer) -> Word:
    """
    Raises:
        InvalidInputError: Blank word, or the base form already exists
        LemmatizerError: The word could not be lemmatized
        StorageError: The word could not be persisted
    """
    text = (data.get("word") or "").strip()
    if not text:
        raise InvalidInputError("word must not be blank")
    base_form = lemmatizer.lemma(text)

    try:
        if db.query(Word.id).filter(Word.word == base_form).first():
            raise InvalidInputError(f"Word already exists: {base_form}")

        word = Word(
            word=base_form,
            meanings=data.get("meanings") or [],
            examples=data.get("examples") or [],
            marked=bool(data.get("marked", False)),
        )
        db.add(word)
        db.commit()
        db.refresh(word)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create word %s: %s", base_form, e, exc_info=True)
        raise StorageError("Failed to create word") from e

    return word


def get_word(db: Session, word_id: int) -> Word:
    try:
        word = db.get(Word, word_id)
    except SQLAlchemyError as e:
        raise StorageError("Failed to load word") from e
    if word is None:
        raise NotFoundError(f"Word not found with id {word_id}")
    return word


def get_word_by_text(db: Session, text: str, lemmatizer: Lemmatizer) -> Word:
    """Look a word up by any inflection of it."""
    base_form = lemmatizer.lemma(text)
    try:
        word = db.query(Word).filter(Word.word == base_form).first()
    except SQLAlchemyError as e:
        raise StorageError("Failed to load word") from e
    if word is None:
        raise NotFoundError(f"Word not found: {text}")
    return word


def list_words(db: Session, offset: int = 0, limit: int = 100) -> List[Word]:
    try:
        return db.query(Word).order_by(Word.word).offset(offset).limit(limit).all()
    except SQLAlchemyError as e:
        raise StorageError("Failed to list words") from e


def set_words_marked(db: Session, words: Sequence[str], lemmatizer: Lemmatizer, marked: bool = True) -> List[Word]:
    """
    Set the global `marked` flag on the given words.

    Words are matched by base form, so any inflection marks the stored
    entry. Words that are not stored are ignored. Returns the updated
    words ordered alphabetically.

    Raises:
        LemmatizerError: A word could not be lemmatized
        StorageError: The update could not be persisted
    """
    base_forms = {lemmatizer.lemma(w) for w in words if w and w.strip()}
    if not base_forms:
        return []

    try:
        updated = db.query(Word).filter(Word.word.in_(base_forms)).order_by(Word.word).all()
        for word in updated:
            word.marked = marked
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to mark words: %s", e, exc_info=True)
        raise StorageError("Failed to mark words") from e

    logger.info("%s %d of %d words", "Marked" if marked else "Unmarked", len(updated), len(base_forms))
    return updated


def list_marked_words(db: Session) -> List[Word]:
    try:
        return db.query(Word).filter(Word.marked.is_(True)).order_by(Word.word).all()
    except SQLAlchemyError as e:
        raise StorageError("Failed to load marked words") from e
