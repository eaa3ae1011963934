"""
Request/response schemas for words, verbal questions, answers and ability.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.enums import CATEGORIES, Competence, Difficulty, FramedAs, QuestionType


# =============================================================================
# WORDS
# =============================================================================

class Meaning(BaseModel):
    meaning: str
    examples: List[str] = Field(default_factory=list)
    type: Optional[str] = None  # Part of speech
    synonyms: List[str] = Field(default_factory=list)


class WordCreate(BaseModel):
    word: str = Field(..., min_length=1)
    meanings: List[Meaning] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)
    marked: bool = False


class WordResponse(BaseModel):
    id: int
    word: str
    meanings: List[Meaning] = Field(default_factory=list)
    examples: Optional[List[str]] = None
    marked: bool = False

    class Config:
        from_attributes = True


class MarkWordsRequest(BaseModel):
    words: List[str] = Field(..., min_length=1)
    marked: bool = True  # false clears the flag


# =============================================================================
# VERBAL QUESTIONS
# =============================================================================

class Option(BaseModel):
    value: str
    correct: bool = False
    justification: Optional[str] = None


class VerbalQuestionCreate(BaseModel):
    competence: Competence
    framed_as: FramedAs
    type: QuestionType
    difficulty: Difficulty
    paragraph: Optional[str] = None
    question: str = Field(..., min_length=1)
    options: List[Option] = Field(..., min_length=1)
    explanation: Optional[str] = None
    vocabulary: List[str] = Field(..., min_length=1)

    @field_validator("options")
    @classmethod
    def at_least_one_correct(cls, options: List[Option]) -> List[Option]:
        if not any(option.correct for option in options):
            raise ValueError("at least one option must be correct")
        return options


class VerbalQuestionResponse(BaseModel):
    id: int
    competence: str
    framed_as: str
    type: str
    difficulty: str
    paragraph: Optional[str] = None
    question: str
    options: List[Option]
    explanation: Optional[str] = None
    wordmap: Dict[str, str] = Field(default_factory=dict)
    vocabulary: List[WordResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class RandomQuestionsRequest(BaseModel):
    limit: int = Field(5, ge=0, le=50)
    type: Optional[QuestionType] = None
    competence: Optional[Competence] = None
    framed_as: Optional[FramedAs] = None
    difficulty: Optional[Difficulty] = None
    exclude: List[int] = Field(default_factory=list)


class AdaptiveQuestionsResponse(BaseModel):
    requested: int
    resolved: int
    questions: List[VerbalQuestionResponse]


# =============================================================================
# ANSWERS & ABILITY
# =============================================================================

class SubmitAnswerRequest(BaseModel):
    question_id: int
    answers: List[str] = Field(default_factory=list)
    correct: Optional[bool] = None  # Graded server-side when omitted
    duration: Optional[int] = Field(None, ge=0)  # Seconds


class CategoryAbility(BaseModel):
    category: str
    difficulty: Difficulty
    type: QuestionType
    score: Optional[int] = None
    attempts: int = 0


class AbilityResponse(BaseModel):
    categories: List[CategoryAbility]

    @classmethod
    def from_profile(cls, profile) -> "AbilityResponse":
        return cls(categories=[
            CategoryAbility(
                category=category.key,
                difficulty=category.difficulty,
                type=category.question_type,
                score=profile.scores[category.index],
                attempts=profile.attempts[category.index],
            )
            for category in CATEGORIES
        ])


class SubmitAnswerResponse(BaseModel):
    id: int
    question_id: int
    correct: bool
    category: str
    score: int
    ability: AbilityResponse


class VerbalStatResponse(BaseModel):
    id: int
    question_id: int
    correct: bool
    answers: List[str]
    duration: Optional[int] = None
    date: datetime
    competence: str
    framed_as: str
    type: str
    difficulty: str
    vocabulary: List[WordResponse] = Field(default_factory=list)


# =============================================================================
# USERS
# =============================================================================

class UserCreate(BaseModel):
    email: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    token: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


class IdList(BaseModel):
    ids: List[int] = Field(..., min_length=1)
