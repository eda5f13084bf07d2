from catalog_search.filters import apply_filters, matches_filters
from catalog_search.product import Product
from catalog_search.query_processor import FilterBy, PriceRange


def test_price_ceiling_is_inclusive():
    cheap = Product(title="A", price=50000)
    dear = Product(title="B", price=50001)
    kept = apply_filters([cheap, dear], FilterBy(price_range=PriceRange(max_price=50000)))
    assert kept == [cheap]


def test_color_is_a_substring_of_product_color():
    space_black = Product(title="A", metadata={"color": "Space Black"})
    colorless = Product(title="B")
    filter_by = FilterBy(color="black")
    assert matches_filters(space_black, filter_by)
    assert not matches_filters(colorless, filter_by)


def test_model_falls_back_to_title():
    tagged = Product(title="Phone", metadata={"model": "iPhone 16 Pro"})
    untagged = Product(title="Apple iPhone 16 128GB")
    other = Product(title="Apple iPhone 15", metadata={"model": "iPhone 15"})
    filter_by = FilterBy(model="iphone 16")
    assert apply_filters([tagged, untagged, other], filter_by) == [tagged, untagged]


def test_brand_is_exact_ignoring_case():
    assert matches_filters(Product(title="A", brand="Apple"), FilterBy(brand="apple"))
    assert not matches_filters(Product(title="A", brand="applecare"), FilterBy(brand="apple"))


def test_empty_filter_keeps_everything():
    products = [Product(title="A"), Product(title="B", price=10)]
    assert apply_filters(products, FilterBy()) == products
