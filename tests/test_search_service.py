"""End-to-end search behaviour over the shared catalog fixture."""

import json

from catalog_search.cache import InMemoryCache
from catalog_search.config import Settings
from catalog_search.product import Product
from catalog_search.search_service import SearchService
from catalog_search.store import CatalogStore


def _ids(result):
    return [product.product_id for product in result.products]


def test_brand_alias_query_ranks_phones_above_accessories(service):
    ids = _ids(service.search("iPhone"))
    assert set(ids[:4]) == {1, 2, 3, 4}
    assert ids[4:] == [7]


def test_misspelled_model_matches_corrected_query(service):
    misspelled = _ids(service.search("Ifone 16"))
    assert set(misspelled) == {1, 2}
    assert misspelled == _ids(service.search("iphone 16"))


def test_price_ceiling_from_query(service):
    result = service.search("iPhone 50k rupees")
    assert set(_ids(result)) == {3, 4, 7}
    assert all(product.price <= 50000 for product in result.products)
    assert all(product.brand == "apple" for product in result.products)


def test_hinglish_cheap_sorts_near_ties_by_price(service):
    result = service.search("Sastha wala iPhone")
    assert result.processed.intent.sort_by == "price_asc"
    assert _ids(result) == [4, 3, 2, 1, 7]


def test_limits(catalog, service):
    assert service.search("iphone", limit=2).count == 2
    assert service.search("iphone", limit=0).count == 0
    capped = SearchService(catalog, config=Settings(max_results=3))
    assert capped.search("iphone", limit=50).count == 3


def test_blank_and_symbol_only_queries_return_nothing(service):
    assert service.search("").count == 0
    assert service.search("   ").count == 0
    assert service.search("!!!").count == 0
    assert service.search(None).count == 0


def test_search_is_repeatable(service):
    assert _ids(service.search("samsung galaxy")) == _ids(service.search("samsung galaxy"))


def test_search_payload_shape(service):
    payload = service.search_payload("airpods", limit=5)
    assert payload["count"] == 1
    item = payload["data"][0]
    assert item["productId"] == 7
    assert item["sellingPrice"] == 24900
    assert set(item) == {
        "productId",
        "title",
        "description",
        "mrp",
        "sellingPrice",
        "metadata",
        "stock",
        "rating",
        "brand",
        "category",
    }


def test_cached_payload_is_invalidated_by_mutation(service):
    assert service.search_payload("airpods")["count"] == 1
    assert service.delete_product(7)
    assert service.search_payload("airpods")["count"] == 0


def test_suggestions(service):
    suggestions = service.suggestions("iph")
    assert "iphone 16 pro" in suggestions
    assert "iphone" in suggestions
    assert len(suggestions) == 5
    assert service.suggestions("iph", limit=2) == suggestions[:2]
    assert service.suggestions("i") == []
    assert service.suggestions(None) == []


def test_filter_facets(service):
    facets = service.filter_facets()
    assert facets["brands"] == ["apple", "boat", "redmi", "samsung"]
    assert facets["categories"] == ["accessories", "headphones", "mobile"]
    assert facets["priceRange"] == {"min": 1499, "max": 121999}


def test_created_product_is_searchable(service):
    product = service.create_product({"title": "Google Pixel 9 128GB Obsidian", "price": 64999, "stock": 5})
    assert product.product_id == 9
    assert product.brand == "unknown"
    assert product.metadata["storage"] == "128GB"
    assert 9 in _ids(service.search("pixel"))


def test_update_metadata_is_searchable(service):
    service.update_metadata(8, {"color": "Crimson"})
    assert _ids(service.search("crimson")) == [8]
    assert service.update_metadata(99, {"color": "red"}) is None


def test_mutations_persist_when_enabled(tmp_path):
    path = tmp_path / "catalog.json"
    config = Settings(catalog_path=str(path), persist_catalog=True)
    service = SearchService(CatalogStore(), cache=InMemoryCache(), config=config)

    service.create_product({"title": "OnePlus 12 256GB", "price": 64999, "brand": "oneplus"})
    service.create_product({"title": "Boat Airdopes 141", "price": 1299, "brand": "boat", "category": "audio"})
    service.delete_product(2)

    records = json.loads(path.read_text(encoding="utf-8"))
    assert [record["productId"] for record in records] == [1]
    assert records[0]["isLatest"] is True

    reloaded = SearchService(CatalogStore(), config=config)
    assert reloaded.load().loaded == 1
    assert reloaded.get_product(1).title == "OnePlus 12 256GB"


def test_huge_numbers_in_query_do_not_raise(service):
    assert service.search("iphone " + "9" * 5000 + "k").count == 0
    assert service.search("iphone " + "9" * 400 + " rupees").count == 0


def test_result_ceiling_holds_above_configured_max(store):
    store.add_many([Product(title=f"Widget {i}") for i in range(150)])
    generous = SearchService(store, config=Settings(max_results=500))
    assert generous.search("widget", limit=500).count == 100


def test_cache_keeps_only_current_catalog_version(service):
    service.search_payload("iphone")
    service.search_payload("iphone")
    assert len(service.cache) == 1
    for i in range(50):
        service.search_payload("iphone")
        service.update_metadata(1, {"color": f"shade{i}"})
    assert len(service.cache) == 1
