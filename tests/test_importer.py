"""Catalog file ingestion and persistence."""

import json
from pathlib import Path

import pytest

from catalog_search.importer import load_catalog, product_from_record, save_catalog
from catalog_search.store import CatalogStore

SAMPLE_CATALOG = Path(__file__).resolve().parents[1] / "data" / "products.json"


def _write(path: Path, records) -> Path:
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_record_metadata_overrides_extracted_attributes():
    product = product_from_record(
        {
            "title": "Apple iPhone 16 128GB Blue",
            "price": 79900,
            "mrp": 89900,
            "metadata": {"color": "Ultramarine"},
        }
    )
    assert product.brand == "apple"
    assert product.metadata["color"] == "Ultramarine"
    assert product.metadata["model"] == "iPhone 16"
    assert product.is_latest is True
    assert product.discount_percentage == pytest.approx(10000 / 89900 * 100)
    assert "ultramarine" in product.search_keywords


def test_explicit_is_latest_wins():
    product = product_from_record({"title": "Apple iPhone 16", "price": 1, "isLatest": False})
    assert product.is_latest is False


def test_bad_records_are_skipped(tmp_path):
    path = _write(
        tmp_path / "catalog.json",
        [
            {"productId": 1, "title": "Redmi Note 13", "price": 20000},
            {"productId": "abc", "title": "Broken id", "price": 10},
            {"productId": 1, "title": "Duplicate", "price": 10},
            {"title": "OnePlus 12", "price": 64999},
        ],
    )
    store = CatalogStore()
    report = load_catalog(store, path)
    assert (report.loaded, report.errors, report.total) == (2, 2, 2)
    assert store.get(2).title == "OnePlus 12"


def test_missing_file_starts_empty(tmp_path):
    report = load_catalog(CatalogStore(), tmp_path / "absent.json")
    assert (report.loaded, report.total) == (0, 0)


def test_non_array_file_is_rejected(tmp_path):
    path = _write(tmp_path / "catalog.json", {"title": "not a list"})
    with pytest.raises(ValueError):
        load_catalog(CatalogStore(), path)


def test_sample_catalog_loads_cleanly():
    store = CatalogStore()
    report = load_catalog(store, SAMPLE_CATALOG)
    assert report.errors == 0
    assert report.loaded == 9
    assert store.get(4).metadata["ram"] == "12GB"


def test_save_round_trips_through_load(tmp_path, catalog):
    path = tmp_path / "nested" / "catalog.json"
    assert save_catalog(catalog, path)
    reloaded = CatalogStore()
    assert load_catalog(reloaded, path).loaded == catalog.count()
    assert reloaded.get(5).brand == "samsung"


def test_save_failure_is_reported(tmp_path, catalog):
    assert save_catalog(catalog, tmp_path) is False
