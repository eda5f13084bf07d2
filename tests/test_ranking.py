"""Score components and intent-aware ordering."""

import pytest

from catalog_search.product import Product
from catalog_search.query_processor import FilterBy, Intent, PriceRange, ProcessedQuery
from catalog_search.ranking import RELEVANCE_WEIGHTS, RankingEngine


@pytest.fixture
def engine() -> RankingEngine:
    return RankingEngine(fuzzy_threshold=2, min_stock_for_boost=5)


def _intent(sort_by=None, **filters) -> ProcessedQuery:
    return ProcessedQuery(intent=Intent(sort_by=sort_by, filter_by=FilterBy(**filters)))


def test_quality_bounds(engine):
    assert engine.quality(Product(title="Bare")) == pytest.approx(0.3)
    best = Product(title="Best", rating=5, review_count=20000, stock=3)
    assert engine.quality(best) == pytest.approx(1.0)


def test_popularity_components(engine):
    assert engine.popularity(Product(title="Deal", price=50, mrp=100)) == pytest.approx(0.3)
    hit = Product(title="Hit", price=50, mrp=100, units_sold=200000, is_latest=True)
    assert engine.popularity(hit) == pytest.approx(1.0)


def test_relevance_of_empty_query_is_zero(engine):
    assert engine.relevance(Product(title="Anything"), ProcessedQuery()) == 0


def test_relevance_exact_title_hit(engine):
    processed = ProcessedQuery(original="iPhone", normalized="iphone", corrected="iphone")
    product = Product(title="Apple iPhone 15")
    # title 0.4 + exact bonus 0.2
    assert engine.relevance(product, processed) == pytest.approx(0.6)


def test_color_bonus_uses_model_weight(engine):
    product = Product(title="Case", metadata={"color": "Black"})
    relevance = engine.relevance(product, _intent(color="black"))
    assert relevance == pytest.approx(RELEVANCE_WEIGHTS["model_match_bonus"])


def test_fuzzy_match_scales_with_distance(engine):
    assert engine.fuzzy_match(Product(title="Galaxy"), ["galaxi"]) == pytest.approx(0.5)
    assert engine.fuzzy_match(Product(title="Galaxy"), ["galaxy"]) == 0


def test_price_boost_is_proportional_to_headroom(engine):
    product = Product(title="Phone", price=25000)
    processed = _intent(price_range=PriceRange(max_price=50000))
    assert engine.boosts(product, processed) == pytest.approx(0.1)
    assert engine.boosts(Product(title="Phone", price=60000), processed) == 0


def test_final_score_is_clamped(engine):
    product = Product(
        title="Apple iPhone 16",
        metadata={"model": "iPhone 16", "color": "Black"},
        brand="apple",
        price=1000,
        mrp=5000,
        rating=5,
        review_count=10000,
        stock=100,
        units_sold=100000,
        is_latest=True,
    )
    processed = ProcessedQuery(
        original="iphone 16",
        normalized="iphone 16",
        corrected="iphone 16",
        intent=Intent(
            sort_by="latest",
            filter_by=FilterBy(brand="apple", color="black", model="iphone 16", price_range=PriceRange(max_price=50000)),
        ),
    )
    breakdown = engine.score_breakdown(product, processed)
    assert breakdown["boosts"] > 0.5
    assert breakdown["final"] == 1.0


def test_price_asc_reorders_near_ties(engine):
    cheaper = Product(product_id=1, title="Phone A", price=1000, rating=4.0)
    pricier = Product(product_id=2, title="Phone B", price=2000, rating=4.1)
    ranked = engine.rank([pricier, cheaper], _intent(sort_by="price_asc"))
    assert ranked[0].score < ranked[1].score
    assert [item.product.product_id for item in ranked] == [1, 2]


def test_latest_tie_prefers_higher_id(engine):
    older = Product(product_id=1, title="Same")
    newer = Product(product_id=2, title="Same")
    ranked = engine.rank([older, newer], _intent(sort_by="latest"))
    assert [item.product.product_id for item in ranked] == [2, 1]


def test_clear_score_gap_ignores_tie_breaker(engine):
    strong = Product(product_id=1, title="Strong", price=9000, rating=5, review_count=10000, stock=10)
    weak = Product(product_id=2, title="Weak", price=100)
    ranked = engine.rank([weak, strong], _intent(sort_by="price_asc"))
    assert [item.product.product_id for item in ranked] == [1, 2]
