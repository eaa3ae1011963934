"""
Pytest configuration and fixtures for GREpandit backend tests.

Provides:
- Test database setup/teardown
- FastAPI test client
- Fake lemmatizer (no spaCy pipeline needed outside the nlp-marked tests)
- User, word and question fixtures
"""

import pytest
import os
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test_grepandit.db"
os.environ["ENABLE_LEMMATIZER_WARMING"] = "false"

from app.main import app
from app.database import Base, build_engine, get_db
from app.models.enums import AbilityProfile, Difficulty, QuestionType, Category
from app.models.models import User, Word, VerbalQuestion, VerbalQuestionWord
from app.services import lemmatizer as lemmatizer_module
from app.services.errors import LemmatizerError
from app.services.lemmatizer import get_lemmatizer


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_grepandit.db"
test_engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database tables once per test session"""
    Base.metadata.create_all(bind=test_engine)
    yield
    # Cleanup after all tests
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()
    if os.path.exists("./test_grepandit.db"):
        os.remove("./test_grepandit.db")


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Provide a database session for each test, with rollback after"""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def committed_db() -> Generator[Session, None, None]:
    """
    Session whose commits reach the database, for tests that open more
    than one connection. Every table is emptied afterwards.
    """
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


# =========================================================================
# Lemmatizer Fixtures
# =========================================================================

class FakeLemmatizer:
    """Dictionary-backed stand-in for the spaCy lemmatizer."""

    FORMS = {
        "ran": "run",
        "running": "run",
        "runs": "run",
        "ameliorated": "ameliorate",
        "ameliorates": "ameliorate",
        "ameliorating": "ameliorate",
        "abacuses": "abacus",
        "was": "be",
        "is": "be",
        "laconic": "laconic",
        "obdurate": "obdurate",
        "mollified": "mollify",
        "mollifies": "mollify",
    }

    def __init__(self):
        self.calls: List[str] = []

    def lemma(self, word: str) -> str:
        normalized = word.strip().lower()
        self.calls.append(normalized)
        return self.FORMS.get(normalized, normalized)


@pytest.fixture
def fake_lemmatizer() -> FakeLemmatizer:
    return FakeLemmatizer()


@pytest.fixture(scope="function")
def client(db: Session, fake_lemmatizer: FakeLemmatizer) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with database and lemmatizer overrides"""
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lemmatizer] = lambda: fake_lemmatizer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def lemmatizer_unavailable(client: TestClient, monkeypatch) -> TestClient:
    """Client whose get_lemmatizer fails, as when the spaCy pipeline cannot be built"""
    def failing_build(model=None):
        raise LemmatizerError("Failed to load English lemmatizer: no lookup tables")

    monkeypatch.setattr(lemmatizer_module, "_lemmatizer", None)
    monkeypatch.setattr(lemmatizer_module, "Lemmatizer", failing_build)
    app.dependency_overrides.pop(get_lemmatizer, None)
    return client


# =========================================================================
# User Fixtures
# =========================================================================

TEST_TOKEN = "test-user-token-123"


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user with an empty ability profile"""
    user = User(
        token=TEST_TOKEN,
        email="test@grepandit.com",
        verbal_ability={},
        verbal_ability_count={}
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {test_user.token}"}


def set_ability(db: Session, user: User, profile: AbilityProfile) -> User:
    """Overwrite a user's stored ability profile"""
    user.verbal_ability, user.verbal_ability_count = profile.to_storage()
    db.commit()
    db.refresh(user)
    return user


# =========================================================================
# Word & Question Fixtures
# =========================================================================

@pytest.fixture
def test_words(db: Session) -> Dict[str, Word]:
    """Vocabulary words stored by base form"""
    words = {}
    for text in ["abacus", "ameliorate", "laconic", "obdurate", "mollify"]:
        word = Word(
            word=text,
            meanings=[{"meaning": f"meaning of {text}", "examples": [], "synonyms": []}],
            examples=[]
        )
        db.add(word)
        words[text] = word
    db.commit()
    for word in words.values():
        db.refresh(word)
    return words


def make_question(
    db: Session,
    difficulty: Difficulty = Difficulty.EASY,
    question_type: QuestionType = QuestionType.READING_COMPREHENSION,
    words: List[Word] = (),
    paragraph: str = "A sample paragraph.",
    competence: str = "Selecting important info",
    framed_as: str = "MCQSingleAnswer",
) -> VerbalQuestion:
    """Insert a question directly, linking the given words"""
    question = VerbalQuestion(
        competence=competence,
        framed_as=framed_as,
        type=question_type.value,
        difficulty=difficulty.value,
        paragraph=paragraph,
        question="Which option is best?",
        options=[
            {"value": "alpha", "correct": True, "justification": None},
            {"value": "beta", "correct": False, "justification": None},
        ],
        wordmap={w.word: w.word for w in words},
    )
    db.add(question)
    db.flush()
    for word in words:
        db.add(VerbalQuestionWord(verbal_question_id=question.id, word_id=word.id))
    db.commit()
    db.refresh(question)
    return question


@pytest.fixture
def question_bank(db: Session) -> Dict[Category, List[VerbalQuestion]]:
    """Two questions in every one of the 9 categories"""
    bank = {}
    for difficulty in Difficulty:
        for question_type in QuestionType:
            category = Category(difficulty, question_type)
            bank[category] = [
                make_question(db, difficulty, question_type, paragraph=f"{category.key} #{i}")
                for i in range(2)
            ]
    return bank


@pytest.fixture
def question_factory(db: Session):
    """make_question bound to the test session"""
    def factory(**kwargs) -> VerbalQuestion:
        return make_question(db, **kwargs)
    return factory


@pytest.fixture
def committed_question_factory(committed_db: Session):
    """make_question bound to the committed session"""
    def factory(**kwargs) -> VerbalQuestion:
        return make_question(committed_db, **kwargs)
    return factory


@pytest.fixture
def ability_setter(db: Session):
    """set_ability bound to the test session"""
    def setter(user: User, profile: AbilityProfile) -> User:
        return set_ability(db, user, profile)
    return setter
