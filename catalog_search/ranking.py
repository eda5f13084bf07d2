"""Multi-factor ranking of filtered candidates.

``final = 0.5 * relevance + 0.3 * quality + 0.2 * popularity + boosts``,
clamped to [0, 1]. Each component is clamped to [0, 1] on its own; boosts are
added uncapped before the final clamp.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Dict, List

from .config import settings
from .product import Product
from .query_processor import SORT_LATEST, SORT_PRICE_ASC, SORT_RATING, ProcessedQuery
from .utils import edit_distance

logger = logging.getLogger(__name__)

RANKING_WEIGHTS = {"relevance": 0.5, "quality": 0.3, "popularity": 0.2}

RELEVANCE_WEIGHTS = {
    "title_match": 0.4,
    "description_match": 0.2,
    "metadata_match": 0.2,
    "exact_match_bonus": 0.2,
    "brand_match_bonus": 0.1,
    "model_match_bonus": 0.1,
}
FUZZY_RELEVANCE_WEIGHT = 0.1

QUALITY_WEIGHTS = {
    "rating": 0.3,
    "review_count": 0.2,
    "return_rate": 0.2,
    "complaint_count": 0.1,
    "stock_availability": 0.2,
}
MAX_REVIEWS = 10000
MAX_COMPLAINTS = 1000

POPULARITY_WEIGHTS = {"units_sold": 0.4, "discount_percentage": 0.3, "is_latest": 0.3}
MAX_UNITS_SOLD = 100000
MAX_DISCOUNT = 50

PRICE_BOOST = 0.2
STOCK_BOOST = 0.1
LATEST_BOOST = 0.15
COLOR_BOOST = 0.1
MODEL_BOOST = 0.1

# Scores closer than this are ties for intent-aware ordering.
TIE_EPSILON = 0.01


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _ratio(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


@dataclass
class RankedProduct:
    product: Product
    score: float


class RankingEngine:
    def __init__(
        self,
        fuzzy_threshold: int = settings.fuzzy_threshold,
        min_stock_for_boost: int = settings.min_stock_for_boost,
    ) -> None:
        self.fuzzy_threshold = fuzzy_threshold
        self.min_stock_for_boost = min_stock_for_boost

    def fuzzy_match(self, product: Product, keywords: List[str]) -> float:
        """Proximity of near-miss words: each pair at distance d adds ``(1 - d / threshold) / len(keywords)``."""
        if not keywords or self.fuzzy_threshold <= 0:
            return 0.0
        words = product.search_text.split()
        score = 0.0
        for keyword in keywords:
            if len(keyword) <= 3:
                continue
            for word in words:
                if len(word) <= 3:
                    continue
                distance = edit_distance(word, keyword, self.fuzzy_threshold)
                if 0 < distance <= self.fuzzy_threshold:
                    score += (1 - distance / self.fuzzy_threshold) / len(keywords)
        return min(1.0, score)

    def relevance(self, product: Product, processed: ProcessedQuery) -> float:
        query = processed.original.lower().strip()
        keywords = [keyword for keyword in processed.corrected.lower().split() if len(keyword) > 2]
        filter_by = processed.intent.filter_by
        title = product.title.lower()
        title_hit = bool(query) and query in title
        score = 0.0

        if title_hit:
            score += RELEVANCE_WEIGHTS["title_match"]
        else:
            title_matches = sum(1 for keyword in keywords if keyword in title)
            score += RELEVANCE_WEIGHTS["title_match"] * _ratio(title_matches, len(keywords))

        description = product.description.lower()
        description_matches = sum(1 for keyword in keywords if keyword in description)
        score += RELEVANCE_WEIGHTS["description_match"] * _ratio(description_matches, len(keywords))

        metadata_text = product.metadata_text()
        metadata_matches = sum(1 for keyword in keywords if keyword in metadata_text)
        score += RELEVANCE_WEIGHTS["metadata_match"] * _ratio(metadata_matches, len(keywords))

        if title_hit:
            score += RELEVANCE_WEIGHTS["exact_match_bonus"]

        if filter_by.brand and product.brand.lower() == filter_by.brand.lower():
            score += RELEVANCE_WEIGHTS["brand_match_bonus"]

        if filter_by.model and filter_by.model.lower() in product.metadata.get("model", "").lower():
            score += RELEVANCE_WEIGHTS["model_match_bonus"]

        # Color shares the model bonus weight.
        if filter_by.color and filter_by.color.lower() in product.metadata.get("color", "").lower():
            score += RELEVANCE_WEIGHTS["model_match_bonus"]

        score += self.fuzzy_match(product, keywords) * FUZZY_RELEVANCE_WEIGHT
        return _clamp(score)

    def quality(self, product: Product) -> float:
        score = (product.rating / 5) * QUALITY_WEIGHTS["rating"]
        score += min(1.0, product.review_count / MAX_REVIEWS) * QUALITY_WEIGHTS["review_count"]
        score += (1 - product.return_rate) * QUALITY_WEIGHTS["return_rate"]
        score += (1 - min(1.0, product.complaint_count / MAX_COMPLAINTS)) * QUALITY_WEIGHTS["complaint_count"]
        score += (1.0 if product.stock > 0 else 0.0) * QUALITY_WEIGHTS["stock_availability"]
        return _clamp(score)

    def popularity(self, product: Product) -> float:
        score = min(1.0, product.units_sold / MAX_UNITS_SOLD) * POPULARITY_WEIGHTS["units_sold"]
        score += min(1.0, product.discount_percentage / MAX_DISCOUNT) * POPULARITY_WEIGHTS["discount_percentage"]
        score += (1.0 if product.is_latest else 0.0) * POPULARITY_WEIGHTS["is_latest"]
        return _clamp(score)

    def boosts(self, product: Product, processed: ProcessedQuery) -> float:
        intent = processed.intent
        filter_by = intent.filter_by
        boost = 0.0

        price_range = filter_by.price_range
        max_price = price_range.max_price if price_range else None
        if max_price and product.price <= max_price:
            boost += min(PRICE_BOOST, (max_price - product.price) / max_price * PRICE_BOOST)

        if product.stock >= self.min_stock_for_boost:
            boost += STOCK_BOOST

        if intent.sort_by == SORT_LATEST and product.is_latest:
            boost += LATEST_BOOST

        color = product.metadata.get("color")
        if filter_by.color and color and filter_by.color.lower() in color.lower():
            boost += COLOR_BOOST

        model = product.metadata.get("model")
        if filter_by.model and model and filter_by.model.lower() in model.lower():
            boost += MODEL_BOOST

        return boost

    def score_breakdown(self, product: Product, processed: ProcessedQuery) -> Dict[str, float]:
        relevance = self.relevance(product, processed)
        quality = self.quality(product)
        popularity = self.popularity(product)
        boosts = self.boosts(product, processed)
        weighted = (
            relevance * RANKING_WEIGHTS["relevance"]
            + quality * RANKING_WEIGHTS["quality"]
            + popularity * RANKING_WEIGHTS["popularity"]
        )
        return {
            "relevance": relevance,
            "quality": quality,
            "popularity": popularity,
            "boosts": boosts,
            "final": _clamp(weighted + boosts),
        }

    def score(self, product: Product, processed: ProcessedQuery) -> float:
        return self.score_breakdown(product, processed)["final"]

    def rank(self, products: List[Product], processed: ProcessedQuery) -> List[RankedProduct]:
        ranked = [RankedProduct(product, self.score(product, processed)) for product in products]
        ranked.sort(key=lambda item: item.score, reverse=True)

        tie_breaker = _TIE_BREAKERS.get(processed.intent.sort_by)
        if tie_breaker is not None:
            ranked.sort(key=cmp_to_key(_near_tie_comparator(tie_breaker)))
        logger.debug("rank sort_by=%s candidates=%s", processed.intent.sort_by, len(ranked))
        return ranked


def _by_price_asc(a: RankedProduct, b: RankedProduct) -> float:
    return a.product.price - b.product.price


def _by_latest(a: RankedProduct, b: RankedProduct) -> float:
    if b.product.is_latest and not a.product.is_latest:
        return 1
    if a.product.is_latest and not b.product.is_latest:
        return -1
    return b.product.product_id - a.product.product_id


def _by_rating(a: RankedProduct, b: RankedProduct) -> float:
    return b.product.rating - a.product.rating


_TIE_BREAKERS: Dict[str, Callable[[RankedProduct, RankedProduct], float]] = {
    SORT_PRICE_ASC: _by_price_asc,
    SORT_LATEST: _by_latest,
    SORT_RATING: _by_rating,
}


def _near_tie_comparator(
    tie_breaker: Callable[[RankedProduct, RankedProduct], float]
) -> Callable[[RankedProduct, RankedProduct], float]:
    def compare(a: RankedProduct, b: RankedProduct) -> float:
        if abs(b.score - a.score) < TIE_EPSILON:
            return tie_breaker(a, b)
        return b.score - a.score

    return compare
