from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String, unique=True, nullable=False, index=True)  # Authenticated subject
    email = Column(String, nullable=True)

    # Adaptive engine state, keyed by category ("Easy_ReadingComprehension")
    verbal_ability = Column(JSON, nullable=True)  # category -> score in [0, 4500]
    verbal_ability_count = Column(JSON, nullable=True)  # category -> graded attempts

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Word(Base):
    __tablename__ = "words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String, unique=True, nullable=False, index=True)  # Lemmatized base form
    meanings = Column(JSON, nullable=False, default=list)  # [{meaning, examples, type, synonyms}]
    examples = Column(JSON, nullable=True)  # Free-standing usage examples
    marked = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class VerbalQuestion(Base):
    __tablename__ = "verbal_questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    competence = Column(String, nullable=False, index=True)
    framed_as = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)
    difficulty = Column(String, nullable=False, index=True)
    paragraph = Column(Text, nullable=True)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # [{value, correct, justification}]
    explanation = Column(Text, nullable=True)

    # Vocabulary tags, computed once at creation and never recomputed
    wordmap = Column(JSON, nullable=False, default=dict)  # surface form -> base form

    last_served_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    vocabulary = relationship("Word", secondary="verbal_question_words", order_by="Word.word", viewonly=True)
    stats = relationship("VerbalStat", back_populates="question")


class VerbalQuestionWord(Base):
    """Join table linking a question to the vocabulary words it exercises."""
    __tablename__ = "verbal_question_words"
    __table_args__ = (
        UniqueConstraint("verbal_question_id", "word_id", name="uq_verbal_question_word"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    verbal_question_id = Column(Integer, ForeignKey("verbal_questions.id"), nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False, index=True)


class VerbalStat(Base):
    """One graded answer. Never updated or deleted."""
    __tablename__ = "verbal_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_token = Column(String, nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("verbal_questions.id"), nullable=False, index=True)
    correct = Column(Boolean, nullable=False)
    answers = Column(JSON, nullable=False, default=list)  # Selected option values
    duration = Column(Integer, nullable=True)  # Seconds
    date = Column(DateTime, default=datetime.utcnow, index=True)

    question = relationship("VerbalQuestion", back_populates="stats")


class UserMarkedWord(Base):
    __tablename__ = "user_marked_words"
    __table_args__ = (
        UniqueConstraint("user_token", "word_id", name="uq_user_marked_word"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_token = Column(String, nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    word = relationship("Word")


class UserMarkedVerbalQuestion(Base):
    __tablename__ = "user_marked_verbal_questions"
    __table_args__ = (
        UniqueConstraint("user_token", "verbal_question_id", name="uq_user_marked_question"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_token = Column(String, nullable=False, index=True)
    verbal_question_id = Column(Integer, ForeignKey("verbal_questions.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
