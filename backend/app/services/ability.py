"""
Ability Store

Per-user, per-category skill scores in [0, 4500], persisted on the User row.

Update rule (answered category only):
- Correct:   score += DELTA[difficulty], capped at MAX_ABILITY
- Incorrect: score -= DELTA[difficulty], floored at MIN_ABILITY
where DELTA = {Easy: 100, Medium: 150, Hard: 200}. A category that was
never scored starts from 0 before the delta is applied.

Read-modify-write of a user's scores is serialized: a process-local lock
(one of a fixed set of stripes, picked by token hash) plus
SELECT ... FOR UPDATE on the user row.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.enums import AbilityProfile, Category, Difficulty
from app.models.models import User
from app.services.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

MIN_ABILITY = 0
MAX_ABILITY = 4500

ABILITY_DELTA: Dict[Difficulty, int] = {
    Difficulty.EASY: 100,
    Difficulty.MEDIUM: 150,
    Difficulty.HARD: 200,
}

LOCK_STRIPES = 64
_user_locks = [threading.RLock() for _ in range(LOCK_STRIPES)]


@contextmanager
def user_lock(token: str) -> Iterator[None]:
    """
    Hold the lock guarding `token`'s ability row in this process.

    Re-entrant, so a caller that writes other rows in the same transaction
    can hold it across apply_outcome(..., commit=False) and its own commit.
    """
    with _user_locks[hash(token) % LOCK_STRIPES]:
        yield


def next_score(current: int, difficulty: Difficulty, correct: bool) -> int:
    """Apply one graded answer to a score, clamped to [MIN_ABILITY, MAX_ABILITY]."""
    delta = ABILITY_DELTA[difficulty]
    if correct:
        return min(MAX_ABILITY, current + delta)
    return max(MIN_ABILITY, current - delta)


def get_profile(db: Session, token: str) -> AbilityProfile:
    """
    Load a user's ability profile.

    Raises:
        NotFoundError: If no user has this token
        StorageError: If the user row cannot be read
    """
    try:
        user = db.query(User).filter(User.token == token).first()
    except SQLAlchemyError as e:
        logger.error("Failed to load user profile: %s", e, exc_info=True)
        raise StorageError("Failed to load user profile") from e

    if user is None:
        raise NotFoundError(f"User not found: {token}")
    return AbilityProfile.from_storage(user.verbal_ability, user.verbal_ability_count)


def apply_outcome(
    db: Session,
    token: str,
    category: Category,
    correct: bool,
    commit: bool = True
) -> AbilityProfile:
    """
    Record one graded answer against the user's score for `category`.

    The category's difficulty picks the step size. Also bumps the
    category's attempt counter and returns the updated profile.

    With commit=False the change is only flushed; the caller commits it
    together with its own writes while holding user_lock(token).

    Raises:
        NotFoundError: If no user has this token
        StorageError: If the update cannot be persisted
    """
    with user_lock(token):
        try:
            user = (
                db.query(User)
                .filter(User.token == token)
                .with_for_update()
                .first()
            )
            if user is None:
                raise NotFoundError(f"User not found: {token}")

            profile = AbilityProfile.from_storage(user.verbal_ability, user.verbal_ability_count)
            slot = category.index
            previous = profile.scores[slot]
            profile.scores[slot] = next_score(previous or 0, category.difficulty, correct)
            profile.attempts[slot] += 1

            # Reassign so the JSON columns are flagged dirty
            user.verbal_ability, user.verbal_ability_count = profile.to_storage()
            if commit:
                db.commit()
            else:
                db.flush()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to update ability for %s: %s", category.key, e, exc_info=True)
            raise StorageError("Failed to update ability") from e

    logger.info(
        "Ability %s: %s -> %d (%s)",
        category.key, previous, profile.scores[slot], "correct" if correct else "incorrect"
    )
    return profile
