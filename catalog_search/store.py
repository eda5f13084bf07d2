"""Authoritative product collection with its inverted indexes.

Three indexes are kept next to the products: keyword, brand and category, each
mapping a lowercase key to the set of product ids filed under it. Every
mutation runs under the write lock and re-files a product by removing all of
its old entries before inserting the fresh ones, so a reader holding the read
lock always sees products and indexes in agreement.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .product import Product
from .utils import query_keywords

logger = logging.getLogger(__name__)

Index = Dict[str, Set[int]]


class CatalogError(Exception):
    """Raised on store misuse, e.g. inserting a product id twice."""


class _ReadWriteLock:
    """Reader-preferring lock: readers share access, a writer is exclusive."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


def _file(index: Index, key: str, product_id: int) -> None:
    index.setdefault(key, set()).add(product_id)


def _unfile(index: Index, key: str, product_id: int) -> None:
    bucket = index.get(key)
    if bucket is None:
        return
    bucket.discard(product_id)
    if not bucket:
        del index[key]


class CatalogView:
    """Read-only access to the catalog, valid while the read lock is held."""

    def __init__(self, store: "CatalogStore") -> None:
        self._products = store._products
        self._keyword_index = store._keyword_index
        self._brand_index = store._brand_index
        self._category_index = store._category_index

    def all_products(self) -> List[Product]:
        return list(self._products.values())

    def by_id(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def _resolve(self, ids: Iterable[int]) -> List[Product]:
        return [self._products[pid] for pid in sorted(ids) if pid in self._products]

    def keyword_ids(self, token: str) -> Set[int]:
        return set(self._keyword_index.get(token.lower(), ()))

    def brand_ids(self, name: str) -> Set[int]:
        return set(self._brand_index.get(name.lower(), ()))

    def category_ids(self, name: str) -> Set[int]:
        return set(self._category_index.get(name.lower(), ()))

    def by_keyword(self, token: str) -> List[Product]:
        return self._resolve(self.keyword_ids(token))

    def by_brand(self, name: str) -> List[Product]:
        return self._resolve(self.brand_ids(name))

    def by_category(self, name: str) -> List[Product]:
        return self._resolve(self.category_ids(name))

    def search_by_text(self, text: str) -> List[Product]:
        """Products carrying every keyword of ``text``, or any of them when none carries all."""
        id_sets = [self.keyword_ids(token) for token in query_keywords(text)]
        if not id_sets:
            return []
        result = set.intersection(*id_sets)
        if not result:
            result = set.union(*id_sets)
        return self._resolve(result)


class CatalogStore:
    def __init__(self) -> None:
        self._products: Dict[int, Product] = {}
        self._keyword_index: Index = {}
        self._brand_index: Index = {}
        self._category_index: Index = {}
        self._next_id = 1
        self._version = 0
        self._lock = _ReadWriteLock()

    @property
    def version(self) -> int:
        return self._version

    @contextmanager
    def reader(self) -> Iterator[CatalogView]:
        with self._lock.read():
            yield CatalogView(self)

    def _index(self, product: Product) -> None:
        pid = product.product_id
        _file(self._category_index, product.category.lower(), pid)
        _file(self._brand_index, product.brand.lower(), pid)
        for keyword in product.search_keywords:
            _file(self._keyword_index, keyword, pid)

    def _unindex(self, product: Product) -> None:
        pid = product.product_id
        _unfile(self._category_index, product.category.lower(), pid)
        _unfile(self._brand_index, product.brand.lower(), pid)
        for keyword in product.search_keywords:
            _unfile(self._keyword_index, keyword, pid)

    def _insert(self, product: Product) -> Product:
        if product.product_id is None:
            product.product_id = self._next_id
        elif product.product_id in self._products:
            raise CatalogError(f"Product {product.product_id} already exists")
        self._next_id = max(self._next_id, product.product_id + 1)
        self._products[product.product_id] = product
        self._index(product)
        return product

    def add(self, product: Product) -> Product:
        with self._lock.write():
            self._insert(product)
            self._version += 1
        logger.debug("added product id=%s title=%r", product.product_id, product.title)
        return product

    def add_many(self, products: Iterable[Product]) -> List[Product]:
        """Insert a batch atomically: a duplicate id anywhere rejects the whole batch."""
        batch = list(products)
        explicit = [product.product_id for product in batch if product.product_id is not None]
        with self._lock.write():
            seen: Set[int] = set()
            for product_id in explicit:
                if product_id in self._products or product_id in seen:
                    raise CatalogError(f"Product {product_id} already exists")
                seen.add(product_id)
            # Generated ids start past every explicit id of the batch.
            self._next_id = max([self._next_id, *(pid + 1 for pid in explicit)])
            added = [self._insert(product) for product in batch]
            self._version += 1
        return added

    def get(self, product_id: int) -> Optional[Product]:
        with self._lock.read():
            return self._products.get(product_id)

    def update_metadata(self, product_id: int, metadata: Dict[str, str]) -> Optional[Product]:
        """Merge ``metadata`` into the product and re-file it in every index."""
        with self._lock.write():
            product = self._products.get(product_id)
            if product is None:
                return None
            self._unindex(product)
            product.metadata = {**product.metadata, **metadata}
            product.refresh_search_text()
            self._index(product)
            self._version += 1
        logger.debug("updated metadata id=%s keys=%s", product_id, sorted(metadata))
        return product

    def delete(self, product_id: int) -> bool:
        with self._lock.write():
            product = self._products.pop(product_id, None)
            if product is None:
                return False
            self._unindex(product)
            self._version += 1
        logger.debug("deleted product id=%s", product_id)
        return True

    def count(self) -> int:
        with self._lock.read():
            return len(self._products)

    def snapshot(self) -> List[Product]:
        with self._lock.read():
            return list(self._products.values())

    def page(self, page: int = 1, limit: int = 50) -> Dict[str, object]:
        with self._lock.read():
            products = list(self._products.values())
        page = max(1, page)
        limit = max(1, limit)
        start = (page - 1) * limit
        return {
            "products": products[start : start + limit],
            "total": len(products),
            "page": page,
            "limit": limit,
            "totalPages": -(-len(products) // limit),
        }

    def clear(self) -> None:
        with self._lock.write():
            self._products.clear()
            self._keyword_index.clear()
            self._brand_index.clear()
            self._category_index.clear()
            self._next_id = 1
            self._version += 1
