"""
Tests for the spaCy-backed lemmatizer.

These load the real lookup pipeline (spacy + spacy-lookups-data).
Run only these with: pytest -m nlp
"""

import pytest

from app.services.lemmatizer import Lemmatizer, get_lemmatizer
from app.services.vocabulary_tagger import tag


@pytest.fixture(scope="module")
def lemmatizer() -> Lemmatizer:
    return Lemmatizer()


class TestLemmatizer:

    @pytest.mark.nlp
    @pytest.mark.parametrize("word,expected", [
        ("running", "run"),
        ("words", "word"),
        ("Children", "child"),
        ("abacus", "abacus"),
    ])
    def test_base_forms(self, lemmatizer: Lemmatizer, word, expected):
        assert lemmatizer.lemma(word) == expected

    @pytest.mark.nlp
    def test_blank_input(self, lemmatizer: Lemmatizer):
        assert lemmatizer.lemma("   ") == ""

    @pytest.mark.nlp
    def test_repeated_lookups_agree(self, lemmatizer: Lemmatizer):
        assert lemmatizer.lemma("running") == lemmatizer.lemma("RUNNING")

    @pytest.mark.nlp
    def test_singleton(self):
        assert get_lemmatizer() is get_lemmatizer()

    @pytest.mark.nlp
    def test_tagging_with_real_pipeline(self, lemmatizer: Lemmatizer):
        result = tag("The children were running home.", ["Words fail"], ["child", "run", "word"], lemmatizer)

        assert result.selected_words == {"child", "run", "word"}
        assert result.word_map["running"] == "run"
        assert result.word_map["Words"] == "word"
