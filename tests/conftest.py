"""Shared fixtures: small in-memory catalogs."""
from __future__ import annotations

import pytest

from catalog_search.cache import InMemoryCache
from catalog_search.product import Product
from catalog_search.search_service import SearchService
from catalog_search.store import CatalogStore


def _phone(product_id: int, title: str, price: float, **extra) -> Product:
    fields = dict(
        product_id=product_id,
        title=title,
        brand="apple",
        category="mobile",
        price=price,
        rating=4.5,
        stock=10,
        units_sold=1000,
        review_count=500,
        complaint_count=10,
        return_rate=0.05,
    )
    fields.update(extra)
    return Product(**fields)


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def catalog() -> CatalogStore:
    """Apple-heavy catalog where the iPhones differ only in title, model and price."""
    store = CatalogStore()
    store.add_many(
        [
            _phone(1, "Apple iPhone 16 Pro 256GB Black", 119900, metadata={"model": "iPhone 16 Pro", "color": "Black"}),
            _phone(2, "Apple iPhone 16 128GB Blue", 79900, metadata={"model": "iPhone 16", "color": "Blue"}),
            _phone(3, "Apple iPhone 15 128GB Pink", 49999, metadata={"model": "iPhone 15", "color": "Pink"}),
            _phone(4, "Apple iPhone 13 128GB Midnight", 43999, metadata={"model": "iPhone 13", "color": "Midnight"}),
            _phone(5, "Samsung Galaxy S24 Ultra", 121999, brand="samsung", metadata={"model": "Galaxy S24"}),
            _phone(6, "Redmi Note 13 Pro", 24999, brand="redmi", metadata={"model": "Note 13"}),
            _phone(7, "Apple AirPods Pro", 24900, category="accessories"),
            _phone(8, "Boat Rockerz Headphone", 1499, brand="boat", category="headphones"),
        ]
    )
    return store


@pytest.fixture
def service(catalog: CatalogStore) -> SearchService:
    return SearchService(catalog, cache=InMemoryCache())
