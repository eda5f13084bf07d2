"""Text helpers shared by ingestion, query processing and ranking.

Tokenization is lowercase plus whitespace splitting in every matching stage.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List

from rapidfuzz.distance import Levenshtein
from unidecode import unidecode

logger = logging.getLogger(__name__)

# Anything that is not an ASCII word character or whitespace becomes a space.
_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)
_DIGITS_RE = re.compile(r"^\d+$")


def normalize_query(text: str | None) -> str:
    """Clean free-form input before translation and spelling correction.

    1. Transliterate to ASCII (``unidecode``) so Devanagari or accented input
       still yields Latin tokens.
    2. Replace punctuation and symbols with spaces.
    3. Lowercase, collapse whitespace and trim.
    """

    if not text or not isinstance(text, str):
        return ""
    ascii_text = unidecode(text)
    cleaned = _NON_WORD_RE.sub(" ", ascii_text).lower()
    normalized = " ".join(cleaned.split())
    logger.debug("normalize_query raw=%r normalized=%r", text, normalized)
    return normalized


def is_digits(token: str) -> bool:
    return bool(_DIGITS_RE.match(token))


def query_keywords(text: str) -> List[str]:
    """Whitespace tokens longer than two characters or made only of digits."""
    return [token for token in text.lower().split() if len(token) > 2 or is_digits(token)]


def extract_keywords(text: str) -> List[str]:
    """Deduplicated index keywords of a search text, in first-seen order."""
    tokens = _NON_WORD_RE.sub(" ", text).split()
    return list(dict.fromkeys(token for token in tokens if len(token) > 2 or is_digits(token)))


def edit_distance(a: str, b: str, cutoff: int | None = None) -> int:
    """Levenshtein distance; with ``cutoff`` any larger distance is reported as ``cutoff + 1``."""
    return Levenshtein.distance(a, b, score_cutoff=cutoff)


def has_fuzzy_word(words: Iterable[str], keywords: Iterable[str], threshold: int) -> bool:
    """True when a word longer than 3 characters is within ``threshold`` edits of a keyword."""
    long_keywords = [keyword for keyword in keywords if len(keyword) > 3]
    if not long_keywords:
        return False
    for word in words:
        if len(word) <= 3:
            continue
        for keyword in long_keywords:
            if edit_distance(word, keyword, threshold) <= threshold:
                return True
    return False
