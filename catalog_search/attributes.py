"""Attribute extraction from product titles and descriptions at ingestion time."""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Tuple

from .vocabulary import CATALOG_COLORS

_RAM_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"(\d+)\s*GB\s*RAM", re.IGNORECASE),
    re.compile(r"RAM[:\s]+(\d+)\s*GB", re.IGNORECASE),
    re.compile(r"(\d+)\s*GB", re.IGNORECASE),
)
# GB/TB amounts not immediately followed by "RAM".
_STORAGE_RE = re.compile(r"(\d+)\s*(GB|TB)(?!\s*RAM)", re.IGNORECASE)
_INCHES_RE = re.compile(r"(\d+\.?\d*)\s*(?:inches|inch|\"|'')", re.IGNORECASE)
_CM_RE = re.compile(r"(\d+\.?\d*)\s*cm", re.IGNORECASE)
_BRIGHTNESS_RE = re.compile(r"(\d+[,.]?\d*)\s*nits", re.IGNORECASE)

# First pattern with a hit names the model.
_MODEL_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"iPhone\s*\d+\s*(?:Pro|Max|Plus|Air)?\s*(?:Pro|Max)?", re.IGNORECASE),
    re.compile(r"Galaxy\s+(?:S|Note|A|M)\s*\d+", re.IGNORECASE),
    re.compile(r"OnePlus\s+(?:Nord\s*)?\d+", re.IGNORECASE),
    re.compile(r"[A-Z][a-z]+\s+\d+"),
)

# (pattern, threshold): a model number at or above the threshold is "latest".
_LATEST_RULES: Tuple[Tuple[str, re.Pattern[str], int], ...] = (
    ("iphone", re.compile(r"iphone\s*(\d+)"), 16),
    ("galaxy s", re.compile(r"galaxy\s+s(\d+)"), 23),
    ("oneplus", re.compile(r"oneplus\s+(?:nord\s*)?(\d+)"), 12),
)
_LATEST_KEYWORDS = ("pro", "max", "plus", "2024", "2025")


def extract_ram(text: str) -> Optional[str]:
    for pattern in _RAM_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"{match.group(1)}GB"
    return None


def extract_storage(text: str) -> Optional[str]:
    """Largest GB/TB amount in the text that is not a RAM figure."""
    sizes: List[int] = []
    for amount, unit in _STORAGE_RE.findall(text):
        value = int(amount)
        sizes.append(value * 1024 if unit.upper() == "TB" else value)
    sizes = [size for size in sizes if size > 0]
    if not sizes:
        return None
    largest = max(sizes)
    if largest >= 1024:
        return f"{largest / 1024:g}TB"
    return f"{largest}GB"


def extract_screen_size(text: str) -> Optional[str]:
    match = _INCHES_RE.search(text)
    if match:
        return f"{match.group(1)} inches"
    match = _CM_RE.search(text)
    if match:
        return f"{float(match.group(1)) / 2.54:.1f} inches"
    return None


def extract_color(text: str) -> Optional[str]:
    lowered = text.lower()
    for color in CATALOG_COLORS:
        if color in lowered:
            return color.title()
    return None


def extract_model(text: str) -> Optional[str]:
    for pattern in _MODEL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


def extract_brightness(text: str) -> Optional[str]:
    match = _BRIGHTNESS_RE.search(text)
    if match:
        return f"{match.group(1).replace(',', '')}nits"
    return None


_EXTRACTORS: Tuple[Tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("ram", extract_ram),
    ("storage", extract_storage),
    ("screenSize", extract_screen_size),
    ("color", extract_color),
    ("model", extract_model),
    ("brightness", extract_brightness),
)


def extract_metadata(title: str, description: str = "") -> Dict[str, str]:
    """Run every extractor over title and description; absent attributes are omitted."""
    combined = f"{title} {description}"
    metadata: Dict[str, str] = {}
    for key, extractor in _EXTRACTORS:
        value = extractor(combined)
        if value:
            metadata[key] = value
    return metadata


def is_latest_model(title: str, description: str = "") -> bool:
    text = f"{title} {description}".lower()
    for trigger, pattern, threshold in _LATEST_RULES:
        if trigger not in text:
            continue
        match = pattern.search(text)
        if match:
            return int(match.group(1)) >= threshold
    return any(keyword in text for keyword in _LATEST_KEYWORDS) and (
        "iphone 1" in text or "galaxy s2" in text
    )
