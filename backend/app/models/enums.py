"""
Verbal question enumerations and the fixed category grid.

Every adaptive decision is made over the 9 (Difficulty x QuestionType)
categories below. Their order is stable (difficulty-major, type-minor),
so a category's index doubles as the bandit arm number and as the slot
in an AbilityProfile.

The string values are the wire/storage representation, e.g.
Difficulty.EASY == "Easy" and the category key "Easy_ReadingComprehension".
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class QuestionType(str, Enum):
    READING_COMPREHENSION = "ReadingComprehension"
    TEXT_COMPLETION = "TextCompletion"
    SENTENCE_EQUIVALENCE = "SentenceEquivalence"


class Competence(str, Enum):
    """GRE verbal competences a question can target."""
    ANALYZING_AND_DRAWING_CONCLUSIONS = "Analyzing and drawing conclusions"
    REASONING_FROM_INCOMPLETE_DATA = "Reasoning from incomplete data"
    IDENTIFYING_AUTHORS_ASSUMPTIONS = "Identifying authors assumptions/perspective"
    UNDERSTANDING_MULTIPLE_LEVELS_OF_MEANING = "Understanding multiple levels of meaning"
    SELECTING_IMPORTANT_INFO = "Selecting important info"
    DISTINGUISH_MAJOR_MINOR_POINTS = "Distinguish major/minor points"


class FramedAs(str, Enum):
    MCQ_SINGLE_ANSWER = "MCQSingleAnswer"
    MCQ_MULTIPLE_CHOICES = "MCQMultipleChoices"
    SELECT_SENTENCE = "SelectSentence"


@dataclass(frozen=True)
class Category:
    """A (difficulty, question type) pair - one bandit arm."""
    difficulty: Difficulty
    question_type: QuestionType

    @property
    def key(self) -> str:
        return f"{self.difficulty.value}_{self.question_type.value}"

    @property
    def index(self) -> int:
        return CATEGORY_INDEX[self]

    @classmethod
    def from_key(cls, key: str) -> "Category":
        """Parse "Easy_ReadingComprehension"; raises ValueError when malformed."""
        parts = key.split("_")
        if len(parts) != 2:
            raise ValueError(f"Malformed category key: {key!r}")
        return cls(Difficulty(parts[0]), QuestionType(parts[1]))


CATEGORIES: Tuple[Category, ...] = tuple(
    Category(difficulty, question_type)
    for difficulty in Difficulty
    for question_type in QuestionType
)
CATEGORY_INDEX: Dict[Category, int] = {category: i for i, category in enumerate(CATEGORIES)}
NUM_CATEGORIES = len(CATEGORIES)


@dataclass
class AbilityProfile:
    """
    Per-category skill scores and attempt counts for one user.

    A score of None means the category has never been scored. Storage keeps
    the two arrays as JSON maps keyed by Category.key; to_storage/from_storage
    convert between the two shapes.
    """
    scores: List[Optional[int]] = field(default_factory=lambda: [None] * NUM_CATEGORIES)
    attempts: List[int] = field(default_factory=lambda: [0] * NUM_CATEGORIES)

    def score(self, category: Category) -> Optional[int]:
        return self.scores[category.index]

    def attempt_count(self, category: Category) -> int:
        return self.attempts[category.index]

    @classmethod
    def from_storage(cls, ability: Optional[Dict[str, int]],
                     counts: Optional[Dict[str, int]]) -> "AbilityProfile":
        profile = cls()
        for category in CATEGORIES:
            if ability and category.key in ability:
                profile.scores[category.index] = int(ability[category.key])
            if counts and category.key in counts:
                profile.attempts[category.index] = int(counts[category.key])
        return profile

    def to_storage(self) -> Tuple[Dict[str, int], Dict[str, int]]:
        ability = {
            category.key: self.scores[category.index]
            for category in CATEGORIES
            if self.scores[category.index] is not None
        }
        counts = {
            category.key: self.attempts[category.index]
            for category in CATEGORIES
            if self.attempts[category.index]
        }
        return ability, counts
