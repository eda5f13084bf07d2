"""Fixed vocabularies used by query understanding and matching.

The lists are ordered: several consumers stop at the first hit, so moving an
entry changes behavior (e.g. ``"red"`` is found before ``"space gray"`` and
inside ``"redmi"``).
"""
from __future__ import annotations

from typing import Dict, List, Tuple

# Brands used for edit-distance spelling correction, checked before terms.
CORRECTION_BRANDS: Tuple[str, ...] = (
    "iphone",
    "samsung",
    "oneplus",
    "xiaomi",
    "redmi",
    "oppo",
    "vivo",
    "realme",
    "nokia",
)

PRODUCT_TERMS: Tuple[str, ...] = (
    "phone",
    "mobile",
    "laptop",
    "headphone",
    "charger",
    "cover",
    "case",
    "screen",
    "guard",
)

# Brand detection in queries; "iphone" is an alias of "apple".
QUERY_BRANDS: Tuple[str, ...] = (
    "iphone",
    "apple",
    "samsung",
    "oneplus",
    "xiaomi",
    "redmi",
    "oppo",
    "vivo",
    "realme",
    "nokia",
)
BRAND_ALIASES: Dict[str, str] = {"iphone": "apple"}

SUGGESTION_BRANDS: Tuple[str, ...] = ("iphone", "samsung", "oneplus", "xiaomi", "redmi")

QUERY_COLORS: Tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "yellow",
    "black",
    "white",
    "silver",
    "gold",
    "pink",
    "purple",
    "orange",
    "grey",
    "gray",
    "brown",
    "starlight",
    "cosmic orange",
    "deep blue",
    "sky blue",
    "space black",
    "space gray",
)

# Catalog-side colors also cover Apple marketing names.
CATALOG_COLORS: Tuple[str, ...] = (
    "blue",
    "red",
    "green",
    "yellow",
    "black",
    "white",
    "silver",
    "gold",
    "pink",
    "purple",
    "orange",
    "grey",
    "gray",
    "brown",
    "starlight",
    "cosmic orange",
    "deep blue",
    "sky blue",
    "space black",
    "space gray",
    "midnight",
    "alpine green",
    "sierra blue",
    "graphite",
    "pacific blue",
)

HINGLISH_MAPPINGS: Dict[str, str] = {
    "sasta": "cheap",
    "sastha": "cheap",
    "wala": "with",
    "mein": "in",
    "ka": "of",
    "ki": "of",
    "ke": "of",
    "se": "from",
    "par": "on",
}

SPELLING_CORRECTIONS: Dict[str, str] = {
    "ifone": "iphone",
    "ipone": "iphone",
    "sastha": "sasta",
    "samsung": "samsung",
    "oneplus": "oneplus",
}

# Words that only steer sorting or filtering and are not search terms.
FILTER_STOPWORDS = frozenset(
    {
        "latest",
        "new",
        "cheap",
        "sasta",
        "best",
        "top",
        "red",
        "blue",
        "black",
        "white",
        "color",
        "rupees",
        "rs",
        "k",
        "thousand",
        "lakh",
        "under",
        "below",
        "upto",
        "max",
    }
)

# Any of these in a query pulls in the whole "mobile" category.
CATEGORY_TRIGGERS: List[str] = ["phone", "mobile", "laptop", "headphone", "charger", "cover", "case"]
CATEGORY_TRIGGER_TARGET = "mobile"
