"""Search pipeline orchestration on top of the in-memory catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Dict, List, Optional

from .cache import CacheBackend, NullCache, cache_key
from .config import Settings, settings
from .filters import apply_filters
from .importer import LoadReport, load_catalog, product_from_record, save_catalog
from .matching import MatchCollector
from .product import Product
from .query_processor import ProcessedQuery, QueryProcessor
from .ranking import RankedProduct, RankingEngine
from .store import CatalogStore
from .vocabulary import SUGGESTION_BRANDS

logger = logging.getLogger(__name__)

# Hard cap on returned hits whatever MAX_RESULTS says.
RESULT_CEILING = 100


def product_payload(product: Product) -> Dict[str, Any]:
    return {
        "productId": product.product_id,
        "title": product.title,
        "description": product.description,
        "mrp": product.mrp,
        "sellingPrice": product.selling_price,
        "metadata": dict(product.metadata),
        "stock": product.stock,
        "rating": product.rating,
        "brand": product.brand,
        "category": product.category,
    }


@dataclass
class SearchResult:
    query: str
    processed: ProcessedQuery
    ranked: List[RankedProduct] = field(default_factory=list)

    @property
    def products(self) -> List[Product]:
        return [item.product for item in self.ranked]

    @property
    def count(self) -> int:
        return len(self.ranked)


class SearchService:
    def __init__(
        self,
        store: CatalogStore,
        cache: Optional[CacheBackend] = None,
        config: Settings = settings,
    ) -> None:
        self.store = store
        self.cache = cache if cache is not None else NullCache()
        self.config = config
        self.processor = QueryProcessor(config.fuzzy_threshold)
        self.collector = MatchCollector(config.fuzzy_threshold, config.fuzzy_scan_limit)
        self.ranking = RankingEngine(config.fuzzy_threshold, config.min_stock_for_boost)

    def search(self, query: Optional[str], limit: Optional[int] = None) -> SearchResult:
        if limit is None:
            limit = self.config.default_results
        if not query or not query.strip():
            return SearchResult(query=query or "", processed=ProcessedQuery())

        t0 = perf_counter()
        processed = self.processor.process(query)
        if not processed.normalized:
            return SearchResult(query=query, processed=processed)
        t1 = perf_counter()
        with self.store.reader() as view:
            candidates = self.collector.collect(view, processed)
            t2 = perf_counter()
            filtered = apply_filters(candidates, processed.intent.filter_by)
            t3 = perf_counter()
            ranked = self.ranking.rank(filtered, processed)
        t4 = perf_counter()

        size = max(0, min(limit, self.config.max_results, RESULT_CEILING))
        ranked = ranked[:size]
        logger.info(
            "timing: total=%.2fms process=%.2fms match=%.2fms filter=%.2fms rank=%.2fms "
            "q=%r corrected=%r candidates=%s filtered=%s hits=%s",
            (t4 - t0) * 1000,
            (t1 - t0) * 1000,
            (t2 - t1) * 1000,
            (t3 - t2) * 1000,
            (t4 - t3) * 1000,
            query,
            processed.corrected,
            len(candidates),
            len(filtered),
            len(ranked),
        )
        return SearchResult(query=query, processed=processed, ranked=ranked)

    def search_payload(self, query: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """JSON-ready search response, served from the cache when possible."""
        if limit is None:
            limit = self.config.default_results
        key = cache_key(self.store.version, query, limit)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("cache_hit q=%r limit=%s", query, limit)
            return cached
        result = self.search(query, limit)
        payload = {
            "data": [product_payload(product) for product in result.products],
            "count": result.count,
        }
        self.cache.set(key, payload, self.config.cache_ttl_seconds)
        return payload

    def suggestions(self, query: Optional[str], limit: int = 10) -> List[str]:
        """Autocomplete fragments: up to three title words starting at a prefix hit, then brands."""
        if not query or len(query) < 2:
            return []
        prefix = query.lower()
        suggestions: Dict[str, None] = {}
        for product in self.search(query, self.config.suggestion_search_limit).products:
            words = product.title.lower().split()
            for index, word in enumerate(words):
                if word.startswith(prefix) and len(word) > len(prefix):
                    fragment = " ".join(words[index : index + 3])
                    suggestions.setdefault(fragment, None)
        for brand in SUGGESTION_BRANDS:
            if brand.startswith(prefix):
                suggestions.setdefault(brand, None)
        return list(suggestions)[: max(0, limit)]

    def filter_facets(self) -> Dict[str, Any]:
        products = self.store.snapshot()
        brands = {p.brand for p in products if p.brand and p.brand != "unknown"}
        categories = {p.category for p in products if p.category}
        prices = [p.price for p in products if p.price]
        return {
            "brands": sorted(brands),
            "categories": sorted(categories),
            "priceRange": {"min": min(prices) if prices else 0, "max": max(prices) if prices else 0},
        }

    def load(self, path: Optional[str] = None) -> LoadReport:
        return load_catalog(self.store, path or self.config.catalog_path)

    def _persist(self) -> None:
        if self.config.persist_catalog:
            save_catalog(self.store, self.config.catalog_path)

    def create_product(self, data: Dict[str, Any]) -> Product:
        record = dict(data)
        record.setdefault("sellingPrice", record.get("price"))
        product = self.store.add(product_from_record(record))
        logger.info("created product id=%s title=%r", product.product_id, product.title)
        self._persist()
        return product

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.store.get(product_id)

    def list_products(self, page: int = 1, limit: int = 50) -> Dict[str, Any]:
        return self.store.page(page, limit)

    def update_metadata(self, product_id: int, metadata: Dict[str, str]) -> Optional[Product]:
        product = self.store.update_metadata(product_id, metadata)
        if product is not None:
            self._persist()
        return product

    def delete_product(self, product_id: int) -> bool:
        deleted = self.store.delete(product_id)
        if deleted:
            self._persist()
        return deleted
