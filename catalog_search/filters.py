"""Narrow candidates by the structured constraints of the query intent."""
from __future__ import annotations

from typing import List

from .product import Product
from .query_processor import FilterBy


def matches_filters(product: Product, filter_by: FilterBy) -> bool:
    price_range = filter_by.price_range
    if price_range is not None:
        if price_range.max_price and product.price > price_range.max_price:
            return False
        if price_range.min_price and product.price < price_range.min_price:
            return False
    if filter_by.color:
        if filter_by.color.lower() not in product.metadata.get("color", "").lower():
            return False
    if filter_by.model:
        # Products without a model attribute are matched on their title.
        haystack = product.metadata.get("model") or product.title or ""
        if filter_by.model.lower() not in haystack.lower():
            return False
    if filter_by.brand:
        if product.brand.lower() != filter_by.brand.lower():
            return False
    return True


def apply_filters(products: List[Product], filter_by: FilterBy) -> List[Product]:
    return [product for product in products if matches_filters(product, filter_by)]
