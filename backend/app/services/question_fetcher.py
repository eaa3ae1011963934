"""
Question Fetcher

Resolves a category to one concrete question the user has not seen in the
current session. Among the matching rows one is chosen uniformly at random
by counting them and reading a single row at a random offset, so the
candidate set never leaves the database.
"""

import logging
import random
from datetime import datetime
from typing import Collection, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.enums import Category
from app.models.models import VerbalQuestion
from app.services.errors import QuestionNotFoundError, StorageError

logger = logging.getLogger(__name__)


def fetch_by_category(
    db: Session,
    category: Category,
    exclude_ids: Collection[int] = (),
    rng: Optional[random.Random] = None
) -> VerbalQuestion:
    """
    Fetch one question matching the category's difficulty and type.

    Raises:
        QuestionNotFoundError: If every matching question is excluded (or none exist)
        StorageError: If the database query fails
    """
    rng = rng or random.Random()

    try:
        query = db.query(VerbalQuestion).filter(
            VerbalQuestion.difficulty == category.difficulty.value,
            VerbalQuestion.type == category.question_type.value,
        )
        if exclude_ids:
            query = query.filter(VerbalQuestion.id.notin_(list(exclude_ids)))

        total = query.count()
        if not total:
            raise QuestionNotFoundError(f"No question left for {category.key}")

        question = query.order_by(VerbalQuestion.id).offset(rng.randrange(total)).limit(1).one()
        question.last_served_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Question lookup failed for %s: %s", category.key, e, exc_info=True)
        raise StorageError(f"Question lookup failed for {category.key}") from e

    return question
