# app/services/tokenizer.py
import re
from typing import Iterator, List

MIN_TERM_LENGTH = 2

# Articles, conjunctions, prepositions, auxiliaries and the "ordering" verbs
# people type in front of what they actually want ("I want to buy ...").
STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
        "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "want", "like", "buy", "need", "please", "give",
    }
)

_SEPARATORS = re.compile(r"[\s,;]+")


def normalize(query_text: str) -> str:
    return query_text.strip().lower()


def iter_terms(query_text: str) -> Iterator[str]:
    """Yield the normalized tokens of query_text that survive filtering."""
    for term in _SEPARATORS.split(normalize(query_text)):
        if len(term) < MIN_TERM_LENGTH or term in STOP_WORDS:
            continue
        yield term


def prepare_search_terms(query_text: str) -> List[str]:
    """
    Clean and split free text into search terms.

    Never returns an empty list: when every token is filtered out the whole
    lowercased, trimmed text becomes the single term.
    """
    terms = list(iter_terms(query_text))
    if not terms:
        return [normalize(query_text)]
    return terms
