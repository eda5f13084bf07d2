"""Query understanding: normalization, Hinglish translation, spelling and intent.

Intent extraction is driven by ordered rule tables. Each table documents its
own precedence:

* ``SORT_RULES``: every group is tested in order and a later hit overwrites an
  earlier one (last match wins), so "cheap best phone" sorts by rating.
* ``QUERY_COLORS`` / ``MODEL_RULES`` / ``QUERY_BRANDS``: first hit wins.
* ``PRICE_RULES``: every match of every rule assigns the price ceiling, so the
  last match evaluated wins. No rule ever assigns a minimum price.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from .config import settings
from .utils import edit_distance, normalize_query
from .vocabulary import (
    BRAND_ALIASES,
    CORRECTION_BRANDS,
    FILTER_STOPWORDS,
    HINGLISH_MAPPINGS,
    PRODUCT_TERMS,
    QUERY_BRANDS,
    QUERY_COLORS,
    SPELLING_CORRECTIONS,
)

logger = logging.getLogger(__name__)

SORT_LATEST = "latest"
SORT_PRICE_ASC = "price_asc"
SORT_RATING = "rating"

SORT_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("latest", "new", "newest"), SORT_LATEST),
    (("cheap", "sasta", "sastha", "affordable", "budget"), SORT_PRICE_ASC),
    (("best", "top"), SORT_RATING),
)

UNIT_MULTIPLIERS: Dict[str, int] = {
    "k": 1000,
    "thousand": 1000,
    "thousands": 1000,
    "lakh": 100000,
    "lac": 100000,
    "rupee": 1,
    "rupees": 1,
    "rs": 1,
}
# Amounts with more digits are not treated as prices.
MAX_AMOUNT_DIGITS = 15

PRICE_RULES: Tuple[Pattern[str], ...] = (
    re.compile(r"(?P<amount>\d+)\s*(?P<unit>k|thousands|thousand)\s*(?:rupees?|rs\.?)?", re.IGNORECASE),
    re.compile(r"(?P<amount>\d+)\s*(?P<unit>lakh|lac)\s*(?:rupees?|rs\.?)?", re.IGNORECASE),
    re.compile(r"(?P<amount>\d+)\s*(?P<unit>rupees|rupee|rs)\.?", re.IGNORECASE),
) + tuple(
    re.compile(rf"{keyword}\s*(?P<amount>\d+)\s*(?P<unit>k|thousand|lakh|lac)?", re.IGNORECASE)
    for keyword in ("under", "below", "upto", "max")
)

MODEL_RULES: Tuple[Pattern[str], ...] = (
    re.compile(r"iphone\s*(\d+)\s*(pro|max|plus|air)?", re.IGNORECASE),
    re.compile(r"galaxy\s+s(\d+)", re.IGNORECASE),
)
_BARE_NUMBER_RE = re.compile(r"\b(\d+)\b")


def _whole_word_rules(mapping: Dict[str, str]) -> Tuple[Tuple[Pattern[str], str], ...]:
    return tuple(
        (re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE), replacement)
        for word, replacement in mapping.items()
    )


HINGLISH_RULES = _whole_word_rules(HINGLISH_MAPPINGS)
SPELLING_RULES = _whole_word_rules(SPELLING_CORRECTIONS)


@dataclass
class PriceRange:
    min_price: Optional[float] = None
    max_price: Optional[float] = None


@dataclass
class FilterBy:
    brand: Optional[str] = None
    color: Optional[str] = None
    model: Optional[str] = None
    price_range: Optional[PriceRange] = None


@dataclass
class Intent:
    sort_by: Optional[str] = None
    filter_by: FilterBy = field(default_factory=FilterBy)
    search_terms: List[str] = field(default_factory=list)


@dataclass
class ProcessedQuery:
    original: str = ""
    normalized: str = ""
    corrected: str = ""
    intent: Intent = field(default_factory=Intent)

    def to_dict(self) -> dict:
        return asdict(self)


def _apply_rules(text: str, rules: Tuple[Tuple[Pattern[str], str], ...]) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def extract_sort(text: str) -> Optional[str]:
    sort_by: Optional[str] = None
    for keywords, value in SORT_RULES:
        if any(keyword in text for keyword in keywords):
            sort_by = value
    return sort_by


def extract_color(text: str) -> Optional[str]:
    lowered = text.lower()
    return next((color for color in QUERY_COLORS if color in lowered), None)


def extract_brand(text: str) -> Optional[str]:
    lowered = text.lower()
    for brand in QUERY_BRANDS:
        if brand in lowered:
            return BRAND_ALIASES.get(brand, brand)
    return None


def _price_spans(text: str) -> List[Tuple[int, int, int]]:
    """(start, end, value) of every price expression, in rule order."""
    spans: List[Tuple[int, int, int]] = []
    for pattern in PRICE_RULES:
        for match in pattern.finditer(text):
            unit = (match.group("unit") or "").lower()
            amount = match.group("amount")
            if len(amount) > MAX_AMOUNT_DIGITS:
                logger.debug("ignoring %s-digit price amount", len(amount))
                continue
            value = int(amount) * UNIT_MULTIPLIERS.get(unit, 1)
            spans.append((match.start(), match.end(), value))
    return spans


def extract_price_range(text: str) -> Optional[PriceRange]:
    max_price: Optional[int] = None
    for _, _, value in _price_spans(text):
        if value > 0:
            max_price = value
    if max_price is None:
        return None
    return PriceRange(min_price=None, max_price=max_price)


def extract_model(text: str) -> Optional[str]:
    """Model phrase or bare model number, ignoring numbers that express a price."""
    for start, end, _ in _price_spans(text):
        text = text[:start] + " " * (end - start) + text[end:]
    for pattern in MODEL_RULES:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    match = _BARE_NUMBER_RE.search(text)
    return match.group(1) if match else None


class QueryProcessor:
    """Turns a raw query into a :class:`ProcessedQuery`."""

    def __init__(self, fuzzy_threshold: int = settings.fuzzy_threshold) -> None:
        self.fuzzy_threshold = fuzzy_threshold

    def translate_hinglish(self, text: str) -> str:
        return _apply_rules(text.lower(), HINGLISH_RULES)

    def _closest_term(self, word: str) -> str:
        # Known words are never rewritten, otherwise "iphone" would become "phone".
        if len(word) <= 3 or word in CORRECTION_BRANDS or word in PRODUCT_TERMS:
            return word
        for vocabulary in (CORRECTION_BRANDS, PRODUCT_TERMS):
            for term in vocabulary:
                distance = edit_distance(word, term, self.fuzzy_threshold)
                if 0 < distance <= self.fuzzy_threshold:
                    return term
        return word

    def correct_spelling(self, text: str) -> str:
        corrected = _apply_rules(text.lower(), SPELLING_RULES)
        return " ".join(self._closest_term(word) for word in corrected.split())

    def extract_intent(self, text: str) -> Intent:
        lowered = text.lower()
        filter_by = FilterBy(
            brand=extract_brand(lowered),
            color=extract_color(lowered),
            model=extract_model(lowered),
            price_range=extract_price_range(lowered),
        )
        search_terms = [word for word in lowered.split() if len(word) > 2 and word not in FILTER_STOPWORDS]
        return Intent(sort_by=extract_sort(lowered), filter_by=filter_by, search_terms=search_terms)

    def process(self, query: str | None) -> ProcessedQuery:
        if not query:
            return ProcessedQuery()
        normalized = normalize_query(query)
        translated = self.translate_hinglish(normalized)
        corrected = self.correct_spelling(translated)
        intent = self.extract_intent(corrected)
        logger.debug(
            "process_query raw=%r normalized=%r translated=%r corrected=%r intent=%s",
            query,
            normalized,
            translated,
            corrected,
            intent,
        )
        return ProcessedQuery(original=query, normalized=normalized, corrected=corrected, intent=intent)
