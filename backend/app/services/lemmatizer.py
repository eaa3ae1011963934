"""
English lemmatizer backed by spaCy.

By default a blank English pipeline with a lookup-table lemmatizer is used
(tables come from the spacy-lookups-data package), which needs no trained
model download. Set LEMMATIZER_MODEL to a spaCy package name such as
"en_core_web_sm" to use a full pipeline instead.

Usage:
    from app.services.lemmatizer import get_lemmatizer

    lemmatizer = get_lemmatizer()
    lemmatizer.lemma("running")  # "run"
"""

import logging
import os
import threading
from typing import Dict, Optional

import spacy

from app.services.errors import LemmatizerError

logger = logging.getLogger(__name__)

LEMMATIZER_MODEL = os.getenv("LEMMATIZER_MODEL")

_lemmatizer: Optional["Lemmatizer"] = None
_lemmatizer_lock = threading.Lock()


class Lemmatizer:
    """Reduces a surface word to its dictionary base form."""

    def __init__(self, model: Optional[str] = None):
        self.model = model
        try:
            if model:
                self._nlp = spacy.load(model, exclude=["parser", "ner"])
            else:
                self._nlp = spacy.blank("en")
                self._nlp.add_pipe("lemmatizer", config={"mode": "lookup"})
                self._nlp.initialize()
        except (OSError, ValueError, ImportError) as e:
            raise LemmatizerError(f"Failed to load English lemmatizer: {e}") from e

        self._cache: Dict[str, str] = {}
        self._cache_lock = threading.Lock()

    def lemma(self, word: str) -> str:
        """
        Return the base form of a single word.

        The word is lower-cased first; an empty string maps to itself.
        """
        normalized = word.strip().lower()
        if not normalized:
            return normalized

        with self._cache_lock:
            cached = self._cache.get(normalized)
        if cached is not None:
            return cached

        try:
            doc = self._nlp(normalized)
        except Exception as e:
            raise LemmatizerError(f"Lemmatization failed for {word!r}: {e}") from e

        result = "".join((token.lemma_ or token.text) + token.whitespace_ for token in doc)

        with self._cache_lock:
            self._cache[normalized] = result
        return result


def get_lemmatizer() -> Lemmatizer:
    """
    Return the process-wide lemmatizer, building it on first use.

    Also used as a FastAPI dependency so tests can override it.
    """
    global _lemmatizer
    if _lemmatizer is None:
        with _lemmatizer_lock:
            if _lemmatizer is None:
                logger.info("Loading lemmatizer (model=%s)", LEMMATIZER_MODEL or "blank:en/lookup")
                _lemmatizer = Lemmatizer(LEMMATIZER_MODEL)
    return _lemmatizer
