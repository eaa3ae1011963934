"""
Reward Source

Turns an ability profile into one reward per category, in CATEGORIES order.
Rewards are inverted ability: the weaker the user is in a category, the
higher its reward, so the bandit steers practice toward weak spots.

- Attempted category (n > 0 attempts, score s):
      reward = clamp(1 - s / (n * MAX_STEP), 0, 1)
  s / n is the score earned per attempt; MAX_STEP (the Hard delta) is the
  most a single attempt can add, which puts the ratio on [0, 1].
- Never attempted (n == 0, whether or not a score exists):
      reward ~ Uniform(0.5, 1.0)
"""

import random
from typing import List, Optional

from app.models.enums import CATEGORIES, AbilityProfile, Difficulty
from app.services.ability import ABILITY_DELTA

MAX_STEP = ABILITY_DELTA[Difficulty.HARD]

UNSEEN_REWARD_LOW = 0.5
UNSEEN_REWARD_HIGH = 1.0


def category_reward(score: Optional[int], attempts: int, rng: random.Random) -> float:
    if not attempts:
        return rng.uniform(UNSEEN_REWARD_LOW, UNSEEN_REWARD_HIGH)
    ratio = (score or 0) / (attempts * MAX_STEP)
    return max(0.0, min(1.0, 1.0 - ratio))


def compute_rewards(profile: AbilityProfile, rng: Optional[random.Random] = None) -> List[float]:
    """Return exactly one reward per category, in fixed category order."""
    rng = rng or random.Random()
    return [
        category_reward(profile.scores[category.index], profile.attempts[category.index], rng)
        for category in CATEGORIES
    ]
