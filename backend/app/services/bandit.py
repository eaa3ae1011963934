"""
Epsilon-greedy arm selection over the 9 verbal categories.

Each pull re-reads the reward vector from the reward source, then:
- with probability epsilon, explores a uniformly random arm
- otherwise exploits the arm with the highest reward (lowest index on ties)

The selector keeps no running estimates of its own; the reward source is
recomputed from the live ability profile every time. Pulls within one
call are independent and may repeat an arm.
"""

import logging
import os
import random
from typing import Callable, List, Optional, Sequence

from app.models.enums import NUM_CATEGORIES
from app.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = float(os.getenv("ADAPTIVE_EPSILON", "0.2"))

RewardSource = Callable[[], Sequence[float]]


def best_arm(rewards: Sequence[float]) -> int:
    """Index of the maximum reward; ties go to the lowest index."""
    best_index = 0
    for i in range(1, len(rewards)):
        if rewards[i] > rewards[best_index]:
            best_index = i
    return best_index


class EpsilonGreedySelector:
    """Picks categories to practice next."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON, rng: Optional[random.Random] = None):
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")
        self.epsilon = epsilon
        self.rng = rng or random.Random()

    def select_arm(self, rewards: Sequence[float]) -> int:
        if len(rewards) != NUM_CATEGORIES:
            raise ValueError(f"Expected {NUM_CATEGORIES} rewards, got {len(rewards)}")
        if self.rng.random() < self.epsilon:
            return self.rng.randrange(NUM_CATEGORIES)
        return best_arm(rewards)

    def select_arms(self, reward_source: RewardSource, user_key: str, count: int) -> List[int]:
        """
        Pull `count` arms for one user.

        Args:
            reward_source: Zero-arg callable returning the current rewards
            user_key: User the picks are for (logging only)
            count: Number of picks

        Returns:
            Ordered list of category indices, length `count`
        """
        if count < 0:
            raise InvalidInputError("count must not be negative")

        arms = [self.select_arm(reward_source()) for _ in range(count)]
        logger.debug("Selected arms %s for user %s", arms, user_key)
        return arms
