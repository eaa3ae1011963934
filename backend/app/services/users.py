"""
User accounts and per-user bookmarks (marked words and questions).
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.models import (
    User, UserMarkedVerbalQuestion, UserMarkedWord, VerbalQuestion, VerbalQuestionWord,
    VerbalStat, Word
)
from app.services.errors import InvalidInputError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


def create_user(db: Session, token: str, email: Optional[str] = None) -> User:
    """
    Raises:
        InvalidInputError: A user with this token already exists
    """
    try:
        if db.query(User.id).filter(User.token == token).first():
            raise InvalidInputError("User already exists")
        user = User(token=token, email=email, verbal_ability={}, verbal_ability_count={})
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create user: %s", e, exc_info=True)
        raise StorageError("Failed to create user") from e
    return user


def get_user(db: Session, token: str) -> User:
    try:
        user = db.query(User).filter(User.token == token).first()
    except SQLAlchemyError as e:
        raise StorageError("Failed to load user") from e
    if user is None:
        raise NotFoundError(f"User not found: {token}")
    return user


def add_marked_words(db: Session, token: str, word_ids: Sequence[int]) -> None:
    """Mark words for a user; already-marked words are left alone."""
    try:
        known = {row[0] for row in db.query(Word.id).filter(Word.id.in_(list(word_ids))).all()}
        unknown = sorted(set(word_ids) - known)
        if unknown:
            raise NotFoundError(f"Words not found: {unknown}")
        existing = {
            row[0] for row in db.query(UserMarkedWord.word_id)
            .filter(UserMarkedWord.user_token == token).all()
        }
        for word_id in dict.fromkeys(word_ids):
            if word_id not in existing:
                db.add(UserMarkedWord(user_token=token, word_id=word_id))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to mark words") from e


def remove_marked_words(db: Session, token: str, word_ids: Sequence[int]) -> None:
    try:
        db.query(UserMarkedWord).filter(
            UserMarkedWord.user_token == token,
            UserMarkedWord.word_id.in_(list(word_ids))
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to unmark words") from e


def get_marked_words(db: Session, token: str) -> List[Word]:
    try:
        rows = (
            db.query(UserMarkedWord)
            .options(selectinload(UserMarkedWord.word))
            .filter(UserMarkedWord.user_token == token)
            .order_by(UserMarkedWord.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load marked words") from e
    return [row.word for row in rows]


def add_marked_questions(db: Session, token: str, question_ids: Sequence[int]) -> None:
    try:
        known = {
            row[0] for row in db.query(VerbalQuestion.id)
            .filter(VerbalQuestion.id.in_(list(question_ids))).all()
        }
        unknown = sorted(set(question_ids) - known)
        if unknown:
            raise NotFoundError(f"Questions not found: {unknown}")
        existing = {
            row[0] for row in db.query(UserMarkedVerbalQuestion.verbal_question_id)
            .filter(UserMarkedVerbalQuestion.user_token == token).all()
        }
        for question_id in dict.fromkeys(question_ids):
            if question_id not in existing:
                db.add(UserMarkedVerbalQuestion(user_token=token, verbal_question_id=question_id))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to mark questions") from e


def remove_marked_questions(db: Session, token: str, question_ids: Sequence[int]) -> None:
    try:
        db.query(UserMarkedVerbalQuestion).filter(
            UserMarkedVerbalQuestion.user_token == token,
            UserMarkedVerbalQuestion.verbal_question_id.in_(list(question_ids))
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to unmark questions") from e


def get_marked_question_ids(db: Session, token: str) -> List[int]:
    try:
        rows = (
            db.query(UserMarkedVerbalQuestion.verbal_question_id)
            .filter(UserMarkedVerbalQuestion.user_token == token)
            .order_by(UserMarkedVerbalQuestion.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load marked questions") from e
    return [row[0] for row in rows]


def get_problematic_words(db: Session, token: str) -> List[Word]:
    """Vocabulary of every question the user has answered incorrectly."""
    try:
        wrong_question_ids = select(VerbalStat.question_id).where(
            VerbalStat.user_token == token, VerbalStat.correct.is_(False)
        )
        return (
            db.query(Word)
            .join(VerbalQuestionWord, VerbalQuestionWord.word_id == Word.id)
            .filter(VerbalQuestionWord.verbal_question_id.in_(wrong_question_ids))
            .distinct()
            .order_by(Word.word)
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load problematic words") from e
