"""Catalog file loading and persistence."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .attributes import extract_metadata, is_latest_model
from .product import Product
from .query_processor import extract_brand
from .store import CatalogError, CatalogStore

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    loaded: int = 0
    errors: int = 0
    total: int = 0


def _load_records(path: Path) -> List[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        records = json.load(fh)
    if not isinstance(records, list):
        raise ValueError(f"Catalog file {path} must contain a JSON array")
    return records


def product_from_record(raw: Dict[str, Any]) -> Product:
    """Build a product from a raw catalog record.

    Attributes are extracted from title and description and then overlaid with
    any metadata the record already carries. A missing brand is detected from
    the title. Ranking inputs missing from the record default to zero.
    """
    title = raw.get("title") or ""
    description = raw.get("description") or ""
    price = float(raw.get("price") or 0)
    metadata = extract_metadata(title, description)
    metadata.update({str(k): str(v) for k, v in (raw.get("metadata") or {}).items()})
    is_latest = raw.get("isLatest")
    product_id = raw.get("productId")
    return Product(
        product_id=int(product_id) if product_id is not None else None,
        title=title,
        description=description,
        brand=raw.get("brand") or extract_brand(title) or "unknown",
        category=raw.get("category") or "mobile",
        price=price,
        mrp=float(raw.get("mrp") or price),
        selling_price=float(raw.get("sellingPrice") or price),
        currency=raw.get("currency") or "Rupee",
        rating=float(raw.get("rating") or 0),
        stock=int(raw.get("stock") or 0),
        metadata=metadata,
        units_sold=int(raw.get("unitsSold") or 0),
        return_rate=float(raw.get("returnRate") or 0),
        review_count=int(raw.get("reviewCount") or 0),
        complaint_count=int(raw.get("complaintCount") or 0),
        discount_percentage=float(raw.get("discountPercentage") or 0),
        is_latest=is_latest_model(title, description) if is_latest is None else bool(is_latest),
    )


def load_catalog(store: CatalogStore, path: str | Path) -> LoadReport:
    """Load every valid record of ``path`` into ``store``; bad records are skipped."""
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Catalog file %s is missing; starting with an empty catalog", file_path)
        return LoadReport(total=store.count())
    report = LoadReport()
    for index, raw in enumerate(_load_records(file_path)):
        try:
            store.add(product_from_record(raw))
            report.loaded += 1
        except (CatalogError, TypeError, ValueError, AttributeError) as exc:
            logger.error("Skipping catalog record %s: %s", index, exc)
            report.errors += 1
    report.total = store.count()
    logger.info(
        "Loaded %s products from %s (%s errors, %s in catalog)",
        report.loaded,
        file_path,
        report.errors,
        report.total,
    )
    return report


def save_catalog(store: CatalogStore, path: str | Path) -> bool:
    file_path = Path(path)
    records = sorted((product.to_record() for product in store.snapshot()), key=lambda r: r["productId"])
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as fh:
            json.dump(records, fh, indent=2, ensure_ascii=False)
    except OSError:
        logger.exception("Failed to save catalog to %s", file_path)
        return False
    return True
