"""Keyword extraction and relevance scoring for memory retrieval.

This is a keyword bag, not an embedding: tokens are matched against
records by plain substring containment.
"""

import re
from collections.abc import Iterable

from .models import MemoryRecord

STOP_WORDS = frozenset({
    # articles, conjunctions
    "a", "an", "the", "and", "but", "or", "for", "nor", "so", "yet",
    "if", "then", "than",
    # prepositions
    "on", "at", "to", "from", "by", "with", "in", "out", "of", "off",
    "into", "onto", "as",
    # forms of be, have, do
    "is", "are", "am", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did",
    # pronouns
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her",
    "us", "them", "my", "your", "his", "its", "our", "their",
    "mine", "yours", "ours", "theirs", "myself", "yourself", "himself",
    "herself", "itself", "ourselves", "themselves",
    # question words, demonstratives
    "what", "which", "who", "whom", "whose", "this", "that", "these",
    "those", "how", "why", "when", "where", "there", "here", "not",
})

_NON_WORD = re.compile(r"[^\w\s]")
MIN_KEYWORD_LENGTH = 3


def extract_keywords(text: str) -> list[str]:
    """Extract candidate search tokens from free text.

    Args:
        text: The text to tokenize.

    Returns:
        Unique lowercase tokens in first-seen order, without stop words
        and without tokens shorter than three characters.
    """
    words = _NON_WORD.sub(" ", text.lower()).split()

    keywords: list[str] = []
    seen: set[str] = set()
    for word in words:
        if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords


def score_record(record: MemoryRecord, keywords: Iterable[str]) -> int:
    """Count the keywords contained in a record's description or content."""
    haystack = f"{record.description} {record.content}".lower()
    return sum(1 for keyword in keywords if keyword.lower() in haystack)


def rank_by_relevance(
    records: Iterable[MemoryRecord], keywords: list[str]
) -> list[MemoryRecord]:
    """Rank records by keyword overlap, dropping those with no overlap.

    Ties keep the input order.
    """
    if not keywords:
        return []

    scored = [(score_record(record, keywords), record) for record in records]
    matching = [(score, record) for score, record in scored if score > 0]
    matching.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in matching]
