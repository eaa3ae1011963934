"""
Vocabulary Tagger

Finds which vocabulary words a question exercises by comparing base forms:

1. Lemmatize every candidate vocabulary word and index base form -> word
2. Split the paragraph and each option on whitespace and . , ! ( )
3. Lemmatize every token; tokens whose lemma is in the index are recorded
   in the word map (surface form -> base form) and their vocabulary word
   is marked as selected

Tagging runs once when a question is created. The result is stored with
the question and never recomputed, so reads never touch the lemmatizer.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from app.services.lemmatizer import Lemmatizer

logger = logging.getLogger(__name__)

TOKEN_SEPARATORS = re.compile(r"[\s.,!()]+")


@dataclass
class TagResult:
    """Vocabulary words present in a question, plus where they occur."""
    selected_words: Set[str] = field(default_factory=set)
    word_map: Dict[str, str] = field(default_factory=dict)  # surface form -> base form


def tokenize(text: str) -> List[str]:
    """Split text into case-preserving surface tokens."""
    if not text:
        return []
    return [token for token in TOKEN_SEPARATORS.split(text) if token]


def build_base_form_index(vocabulary: Iterable[str], lemmatizer: Lemmatizer) -> Dict[str, str]:
    """Map each vocabulary word's base form back to the word as given."""
    index = {}
    for word in vocabulary:
        index[lemmatizer.lemma(word)] = word
    return index


def tag(paragraph: str, options: Iterable[str], vocabulary: Iterable[str],
        lemmatizer: Lemmatizer) -> TagResult:
    """
    Tag a question's text against a vocabulary list.

    Pure function of its inputs: the same paragraph, options and vocabulary
    always produce the same selected words and word map.

    Raises:
        LemmatizerError: If the lemmatizer fails on any word
    """
    base_forms = build_base_form_index(vocabulary, lemmatizer)
    result = TagResult()

    texts = [paragraph or ""]
    texts.extend(options)

    for text in texts:
        for token in tokenize(text):
            lemma = lemmatizer.lemma(token)
            if lemma in base_forms:
                result.word_map[token] = lemma
                result.selected_words.add(base_forms[lemma])

    logger.debug(
        "Tagged %d vocabulary words (%d surface forms) from %d candidates",
        len(result.selected_words), len(result.word_map), len(base_forms)
    )
    return result
