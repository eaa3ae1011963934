"""
GREpandit Schemas Package

Pydantic models for request/response validation.
"""

from app.schemas.verbal import (
    # Words
    Meaning,
    WordCreate,
    WordResponse,
    MarkWordsRequest,

    # Verbal questions
    Option,
    VerbalQuestionCreate,
    VerbalQuestionResponse,
    RandomQuestionsRequest,
    AdaptiveQuestionsResponse,

    # Answers & ability
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    CategoryAbility,
    AbilityResponse,
    VerbalStatResponse,

    # Users
    UserCreate,
    UserResponse,
    IdList,
)

__all__ = [
    "Meaning",
    "WordCreate",
    "WordResponse",
    "MarkWordsRequest",
    "Option",
    "VerbalQuestionCreate",
    "VerbalQuestionResponse",
    "RandomQuestionsRequest",
    "AdaptiveQuestionsResponse",
    "SubmitAnswerRequest",
    "SubmitAnswerResponse",
    "CategoryAbility",
    "AbilityResponse",
    "VerbalStatResponse",
    "UserCreate",
    "UserResponse",
    "IdList",
]
