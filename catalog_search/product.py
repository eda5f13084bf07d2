"""In-memory product record."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import extract_keywords


@dataclass(eq=False)
class Product:
    title: str = ""
    description: str = ""
    brand: str = "unknown"
    category: str = "mobile"
    price: float = 0.0
    mrp: float = 0.0
    selling_price: float = 0.0
    currency: str = "Rupee"
    rating: float = 0.0
    stock: int = 0
    metadata: Dict[str, str] = field(default_factory=dict)
    units_sold: int = 0
    return_rate: float = 0.0
    review_count: int = 0
    complaint_count: int = 0
    discount_percentage: float = 0.0
    is_latest: bool = False
    product_id: Optional[int] = None
    search_text: str = field(default="", init=False)
    search_keywords: List[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.title = self.title or ""
        self.description = self.description or ""
        self.brand = self.brand or "unknown"
        self.category = self.category or "mobile"
        self.mrp = self.mrp or self.price
        self.selling_price = self.selling_price or self.price
        if self.mrp > 0 and self.price < self.mrp:
            self.discount_percentage = (self.mrp - self.price) / self.mrp * 100
        self.refresh_search_text()

    def refresh_search_text(self) -> None:
        """Re-derive ``search_text`` and ``search_keywords``.

        Must run after any change to title, description or metadata; the store
        relies on it to keep the keyword index in sync.
        """
        parts = [self.title, self.description, self.brand, self.category]
        parts.extend(value for value in self.metadata.values() if isinstance(value, str))
        self.search_text = " ".join(parts).lower()
        self.search_keywords = extract_keywords(self.search_text)

    def metadata_text(self) -> str:
        return " ".join(value for value in self.metadata.values() if isinstance(value, str)).lower()

    def to_record(self) -> Dict[str, Any]:
        """Raw catalog-file representation used for persistence."""
        return {
            "productId": self.product_id,
            "title": self.title,
            "description": self.description,
            "brand": self.brand,
            "category": self.category,
            "price": self.price,
            "mrp": self.mrp,
            "rating": self.rating,
            "currency": self.currency,
            "stock": self.stock,
            "metadata": dict(self.metadata),
            "unitsSold": self.units_sold,
            "returnRate": self.return_rate,
            "reviewCount": self.review_count,
            "complaintCount": self.complaint_count,
            "isLatest": self.is_latest,
        }
