"""
Answer records and their effect on ability.

Every recorded answer triggers exactly one ability update for the
(user, category of the answered question) pair.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.enums import AbilityProfile, Category
from app.models.models import User, VerbalQuestion, VerbalStat
from app.services.ability import apply_outcome, user_lock
from app.services.errors import InvalidInputError, NotFoundError, StorageError, VerbalEngineError

logger = logging.getLogger(__name__)


def grade_answers(question: VerbalQuestion, answers: Sequence[str]) -> bool:
    """Correct iff the selected values are exactly the question's correct options."""
    expected = {option["value"] for option in question.options if option.get("correct")}
    return bool(expected) and set(answers) == expected


def question_category(question: VerbalQuestion) -> Category:
    try:
        return Category.from_key(f"{question.difficulty}_{question.type}")
    except ValueError as e:
        raise InvalidInputError(f"Question {question.id} has no valid category") from e


def record_answer(
    db: Session,
    token: str,
    question_id: int,
    answers: Sequence[str],
    correct: Optional[bool] = None,
    duration: Optional[int] = None
) -> Tuple[VerbalStat, AbilityProfile]:
    """
    Store one answer and update the user's ability for the question's category.

    When `correct` is omitted the answer is graded against the question's
    correct options.

    Raises:
        NotFoundError: Unknown user or question
        InvalidInputError: Negative duration
        StorageError: The answer or ability update could not be persisted
    """
    if duration is not None and duration < 0:
        raise InvalidInputError("duration must not be negative")

    try:
        user_exists = db.query(User.id).filter(User.token == token).first() is not None
        question = db.get(VerbalQuestion, question_id)
    except SQLAlchemyError as e:
        raise StorageError("Failed to load answer context") from e

    if not user_exists:
        raise NotFoundError(f"User not found: {token}")
    if question is None:
        raise NotFoundError(f"Question not found with id {question_id}")

    category = question_category(question)
    if correct is None:
        correct = grade_answers(question, answers)

    stat = VerbalStat(
        user_token=token,
        question_id=question_id,
        correct=correct,
        answers=list(answers),
        duration=duration,
        date=datetime.utcnow(),
    )

    # Answer row and ability update commit together or not at all
    with user_lock(token):
        try:
            db.add(stat)
            db.flush()
            profile = apply_outcome(db, token, category, correct, commit=False)
            db.commit()
            db.refresh(stat)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to record answer: %s", e, exc_info=True)
            raise StorageError("Failed to record answer") from e
        except VerbalEngineError:
            db.rollback()
            raise

    return stat, profile


def get_stats_for_user(db: Session, token: str) -> List[VerbalStat]:
    """All answers by a user, newest first, with question and vocabulary loaded."""
    try:
        return (
            db.query(VerbalStat)
            .options(selectinload(VerbalStat.question).selectinload(VerbalQuestion.vocabulary))
            .filter(VerbalStat.user_token == token)
            .order_by(VerbalStat.date.desc(), VerbalStat.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load verbal stats") from e
