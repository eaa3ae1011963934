"""
Verbal question storage: creation with vocabulary tagging, and reads.

Creation is a single unit of work. The text is tagged first (so a
lemmatizer failure aborts before any write), then the question, its word
map and its vocabulary links are flushed and committed together; any
database error rolls the whole question back.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.models import VerbalQuestion, VerbalQuestionWord, Word
from app.services.errors import InvalidInputError, NotFoundError, StorageError
from app.services.lemmatizer import Lemmatizer
from app.services.vocabulary_tagger import tag

logger = logging.getLogger(__name__)

# Upper bound for the "questions on vocabulary" drill
VOCAB_DRILL_LIMIT = 5


def create_question(db: Session, data: Dict[str, Any], lemmatizer: Lemmatizer) -> VerbalQuestion:
    """
    Tag and persist a new verbal question.

    Args:
        data: Validated question fields: competence, framed_as, type,
            difficulty, paragraph, question, options [{value, correct,
            justification}], explanation, vocabulary [str]
        lemmatizer: Lemmatizer used for tagging

    Raises:
        InvalidInputError: Empty vocabulary, or a vocabulary word missing from the words table
        LemmatizerError: Tagging failed (nothing is written)
        StorageError: The question could not be persisted (nothing is written)
    """
    vocabulary = [w.strip() for w in data.get("vocabulary") or [] if w and w.strip()]
    if not vocabulary:
        raise InvalidInputError("vocabulary must contain at least one word")

    option_texts = [option["value"] for option in data["options"]]
    result = tag(data.get("paragraph") or "", option_texts, vocabulary, lemmatizer)

    # Vocabulary words are stored by base form
    base_forms = {word: lemmatizer.lemma(word) for word in vocabulary}

    try:
        known = {
            w.word: w
            for w in db.query(Word).filter(Word.word.in_(set(base_forms.values()))).all()
        }
        missing = sorted(word for word, base in base_forms.items() if base not in known)
        if missing:
            raise InvalidInputError(f"Unknown vocabulary words: {', '.join(missing)}")

        question = VerbalQuestion(
            competence=data["competence"],
            framed_as=data["framed_as"],
            type=data["type"],
            difficulty=data["difficulty"],
            paragraph=data.get("paragraph"),
            question=data["question"],
            options=data["options"],
            explanation=data.get("explanation"),
            wordmap=result.word_map,
        )
        db.add(question)
        db.flush()

        linked_ids = {known[base_forms[word]].id for word in result.selected_words}
        for word_id in sorted(linked_ids):
            db.add(VerbalQuestionWord(verbal_question_id=question.id, word_id=word_id))

        db.commit()
        db.refresh(question)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create verbal question: %s", e, exc_info=True)
        raise StorageError("Failed to create verbal question") from e

    logger.info(
        "Created verbal question %d (%s_%s) tagged with %d words",
        question.id, question.difficulty, question.type, len(result.selected_words)
    )
    return question


def get_question(db: Session, question_id: int) -> VerbalQuestion:
    """
    Raises:
        NotFoundError: If the question does not exist
    """
    try:
        question = (
            db.query(VerbalQuestion)
            .options(selectinload(VerbalQuestion.vocabulary))
            .filter(VerbalQuestion.id == question_id)
            .first()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load verbal question") from e

    if question is None:
        raise NotFoundError(f"Question not found with id {question_id}")
    return question


def get_questions_by_ids(db: Session, ids: Sequence[int]) -> List[VerbalQuestion]:
    """Load questions in the order of `ids`; unknown ids are skipped."""
    if not ids:
        return []
    try:
        rows = (
            db.query(VerbalQuestion)
            .options(selectinload(VerbalQuestion.vocabulary))
            .filter(VerbalQuestion.id.in_(list(ids)))
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load verbal questions") from e

    by_id = {q.id: q for q in rows}
    return [by_id[i] for i in dict.fromkeys(ids) if i in by_id]


def get_random_questions(
    db: Session,
    limit: int,
    question_type: Optional[str] = None,
    competence: Optional[str] = None,
    framed_as: Optional[str] = None,
    difficulty: Optional[str] = None,
    exclude_ids: Sequence[int] = (),
    rng: Optional[random.Random] = None
) -> List[VerbalQuestion]:
    """Up to `limit` random questions matching the optional filters."""
    if limit < 0:
        raise InvalidInputError("limit must not be negative")
    rng = rng or random.Random()

    try:
        query = db.query(VerbalQuestion.id)
        if question_type:
            query = query.filter(VerbalQuestion.type == question_type)
        if competence:
            query = query.filter(VerbalQuestion.competence == competence)
        if framed_as:
            query = query.filter(VerbalQuestion.framed_as == framed_as)
        if difficulty:
            query = query.filter(VerbalQuestion.difficulty == difficulty)
        if exclude_ids:
            query = query.filter(VerbalQuestion.id.notin_(list(exclude_ids)))
        candidate_ids = sorted(row[0] for row in query.all())
    except SQLAlchemyError as e:
        raise StorageError("Failed to query random questions") from e

    picked = rng.sample(candidate_ids, min(limit, len(candidate_ids)))
    return get_questions_by_ids(db, picked)


def get_questions_on_vocab(
    db: Session,
    word_ids: Sequence[int],
    exclude_ids: Sequence[int] = (),
    limit: int = VOCAB_DRILL_LIMIT,
    rng: Optional[random.Random] = None
) -> List[VerbalQuestion]:
    """Questions that exercise any of `word_ids`, at most `limit`, picked at random."""
    if not word_ids:
        return []
    rng = rng or random.Random()
    excluded = set(exclude_ids)

    try:
        rows = (
            db.query(VerbalQuestionWord.verbal_question_id)
            .filter(VerbalQuestionWord.word_id.in_(list(word_ids)))
            .distinct()
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to query questions on vocabulary") from e

    question_ids = sorted(row[0] for row in rows if row[0] not in excluded)
    if len(question_ids) > limit:
        question_ids = rng.sample(question_ids, limit)
    return get_questions_by_ids(db, question_ids)


def get_vocabulary_by_question_ids(db: Session, ids: Sequence[int]) -> Dict[int, List[Word]]:
    """Map each question id to the vocabulary words linked to it."""
    if not ids:
        return {}
    try:
        rows = (
            db.query(VerbalQuestionWord.verbal_question_id, Word)
            .join(Word, Word.id == VerbalQuestionWord.word_id)
            .filter(VerbalQuestionWord.verbal_question_id.in_(list(ids)))
            .order_by(Word.word)
            .all()
        )
    except SQLAlchemyError as e:
        raise StorageError("Failed to load question vocabulary") from e

    vocabulary: Dict[int, List[Word]] = {}
    for question_id, word in rows:
        vocabulary.setdefault(question_id, []).append(word)
    return vocabulary
