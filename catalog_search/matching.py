"""Candidate retrieval.

Several complementary strategies are OR-combined into one candidate set:

1. full normalized query as a substring of the title or description;
2. every corrected keyword present in the product's search text;
3. keyword-index lookup per corrected keyword (broader than 2 and in practice
   the bulk of the candidates);
4. brand-index lookup for the detected brand;
5. the whole "mobile" category whenever a category-like word appears, whatever
   that word was;
6. a fuzzy scan of the catalog when fewer than ``FUZZY_TRIGGER`` candidates
   were found;
7. if still nothing matched, an index AND lookup that degrades to OR.
"""
from __future__ import annotations

import logging
from typing import List, Set

from .config import settings
from .product import Product
from .query_processor import ProcessedQuery
from .store import CatalogView
from .utils import has_fuzzy_word, query_keywords
from .vocabulary import CATEGORY_TRIGGER_TARGET, CATEGORY_TRIGGERS

logger = logging.getLogger(__name__)

FUZZY_TRIGGER = 10


class MatchCollector:
    def __init__(
        self,
        fuzzy_threshold: int = settings.fuzzy_threshold,
        fuzzy_scan_limit: int = settings.fuzzy_scan_limit,
    ) -> None:
        self.fuzzy_threshold = fuzzy_threshold
        self.fuzzy_scan_limit = fuzzy_scan_limit

    def _fuzzy_ids(self, view: CatalogView, keywords: List[str]) -> Set[int]:
        products = view.all_products()
        if len(products) > self.fuzzy_scan_limit:
            logger.warning(
                "fuzzy scan truncated to %s of %s products", self.fuzzy_scan_limit, len(products)
            )
            products = products[: self.fuzzy_scan_limit]
        return {
            product.product_id
            for product in products
            if has_fuzzy_word(product.search_text.split(), keywords, self.fuzzy_threshold)
        }

    def collect(self, view: CatalogView, processed: ProcessedQuery) -> List[Product]:
        normalized = processed.normalized
        corrected = processed.corrected.lower()
        keywords = query_keywords(corrected)
        matches: Set[int] = set()

        for product in view.all_products():
            if normalized and (
                normalized in product.title.lower() or normalized in product.description.lower()
            ):
                matches.add(product.product_id)
            elif keywords and all(keyword in product.search_text for keyword in keywords):
                matches.add(product.product_id)
        direct = len(matches)

        for keyword in keywords:
            matches |= view.keyword_ids(keyword)

        brand = processed.intent.filter_by.brand
        if brand:
            matches |= view.brand_ids(brand)

        if any(trigger in corrected for trigger in CATEGORY_TRIGGERS):
            matches |= view.category_ids(CATEGORY_TRIGGER_TARGET)

        fuzzy_added = 0
        if len(matches) < FUZZY_TRIGGER:
            before = len(matches)
            matches |= self._fuzzy_ids(view, keywords)
            fuzzy_added = len(matches) - before

        if not matches and keywords:
            fallback = view.search_by_text(" ".join(keywords))
            logger.debug("collect q=%r fell back to index lookup hits=%s", corrected, len(fallback))
            return fallback

        logger.debug(
            "collect q=%r keywords=%s direct=%s fuzzy=%s total=%s",
            corrected,
            keywords,
            direct,
            fuzzy_added,
            len(matches),
        )
        return [product for product in map(view.by_id, sorted(matches)) if product is not None]
