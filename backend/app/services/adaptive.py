"""
Adaptive Question Selection

Serves a batch of questions aimed at the user's weakest categories:
1. Load the user's ability profile
2. Build a reward source over the 9 categories (inverted ability)
3. Let the epsilon-greedy bandit pick one category per requested question
4. Resolve each pick to an unseen question; picks with nothing left are
   skipped (no substitute arm), so the batch may come back short
5. Return the resolved questions with their precomputed vocabulary

The returned batch never repeats a question id and never contains an id
the caller asked to exclude.
"""

import logging
import os
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.enums import CATEGORIES
from app.models.models import VerbalQuestion
from app.services.ability import get_profile
from app.services.bandit import EpsilonGreedySelector
from app.services.errors import InvalidInputError, QuestionNotFoundError
from app.services.question_fetcher import fetch_by_category
from app.services.rewards import compute_rewards

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = int(os.getenv("ADAPTIVE_MAX_BATCH", "20"))


@dataclass
class AdaptiveBatch:
    """Questions resolved for one adaptive request."""
    requested: int
    questions: List[VerbalQuestion] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.questions


def get_adaptive_questions(
    db: Session,
    token: str,
    count: int,
    exclude_ids: Sequence[int] = (),
    selector: Optional[EpsilonGreedySelector] = None,
    rng: Optional[random.Random] = None
) -> AdaptiveBatch:
    """
    Pick up to `count` questions for a user.

    Args:
        db: Database session
        token: User token
        count: Requested batch size (0..MAX_BATCH_SIZE)
        exclude_ids: Question ids already shown this session
        selector: Arm selector (defaults to epsilon-greedy with ADAPTIVE_EPSILON)
        rng: Random source for rewards and question choice

    Raises:
        InvalidInputError: If count is out of range
        NotFoundError: If the user does not exist
        StorageError: If the database cannot be read
    """
    if count < 0 or count > MAX_BATCH_SIZE:
        raise InvalidInputError(f"count must be between 0 and {MAX_BATCH_SIZE}")

    rng = rng or random.Random()
    selector = selector or EpsilonGreedySelector(rng=rng)

    profile = get_profile(db, token)
    arms = selector.select_arms(lambda: compute_rewards(profile, rng), token, count)

    batch = AdaptiveBatch(requested=count)
    seen = set(exclude_ids)

    for arm in arms:
        category = CATEGORIES[arm]
        try:
            question = fetch_by_category(db, category, seen, rng)
        except QuestionNotFoundError:
            logger.info("No unseen question for %s, skipping pick", category.key)
            continue
        seen.add(question.id)
        batch.questions.append(question)

    if len(batch.questions) < count:
        logger.info("Adaptive batch resolved %d of %d picks", len(batch.questions), count)

    return batch
