# Services module

# Errors
from app.services.errors import (
    VerbalEngineError,
    NotFoundError,
    QuestionNotFoundError,
    InvalidInputError,
    StorageError,
    LemmatizerError,
)

# Adaptive selection
from app.services.ability import apply_outcome, get_profile, next_score
from app.services.rewards import compute_rewards
from app.services.bandit import EpsilonGreedySelector, best_arm
from app.services.question_fetcher import fetch_by_category
from app.services.adaptive import AdaptiveBatch, get_adaptive_questions

# Vocabulary
from app.services.lemmatizer import Lemmatizer, get_lemmatizer
from app.services.vocabulary_tagger import TagResult, tag

__all__ = [
    # Errors
    "VerbalEngineError",
    "NotFoundError",
    "QuestionNotFoundError",
    "InvalidInputError",
    "StorageError",
    "LemmatizerError",
    # Adaptive selection
    "apply_outcome",
    "get_profile",
    "next_score",
    "compute_rewards",
    "EpsilonGreedySelector",
    "best_arm",
    "fetch_by_category",
    "AdaptiveBatch",
    "get_adaptive_questions",
    # Vocabulary
    "Lemmatizer",
    "get_lemmatizer",
    "TagResult",
    "tag",
]
