import json
import logging
import random
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from vecgen.core.seeding import pick, randint_between

logger = logging.getLogger(__name__)

PALETTE_FILE = Path(__file__).resolve().parent.parent / "data" / "palettes.json"

DEFAULT_CATEGORY = "default"
RANDOM_CATEGORY = "random_category"
RANDOM_PALETTE = "random_palette"
RANDOM_IN_CATEGORY = "random_in_category"
FALLBACK_PALETTE = "fallback"

# Hardcoded tail of the fallback chain
FALLBACK_COLORS = ["#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF", "#FF00FF"]
NO_DATA_COLORS = ["#FF0000", "#00FF00", "#0000FF"]
SAFETY_COLORS = ["#333333", "#666666", "#999999", "#CCCCCC"]
ULTIMATE_COLORS = ["#444444", "#888888", "#BBBBBB"]

_VALID_HEX = re.compile(r"^#[0-9A-Fa-f]{6}$")

ColorMap = Mapping[str, Any]


def load_palettes(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the category -> colors map, returning {} when the file is unusable"""
    palette_path = Path(path) if path else PALETTE_FILE
    try:
        with open(palette_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load color data from {palette_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Color data in {palette_path} is not an object")
        return {}
    return data


def is_valid_hex(value: Any) -> bool:
    return isinstance(value, str) and bool(_VALID_HEX.match(value))


def category_colors(all_colors: ColorMap, category: str) -> List[str]:
    """Hex strings of one category; entries may be {name, hex} dicts or strings"""
    entries = all_colors.get(category)
    if not isinstance(entries, list):
        return []
    colors = []
    for entry in entries:
        value = entry.get("hex") if isinstance(entry, Mapping) else entry
        if value:
            colors.append(value)
    return colors


def _default_category(all_colors: ColorMap) -> Optional[str]:
    if DEFAULT_CATEGORY in all_colors:
        return DEFAULT_CATEGORY
    for name in all_colors:
        if any(is_valid_hex(c) for c in category_colors(all_colors, name)):
            return name
    return None


def _select(
    all_colors: ColorMap, category: str, palette_name: str, rng: random.Random
) -> List[str]:
    if palette_name == RANDOM_PALETTE or category == RANDOM_CATEGORY:
        chosen = pick(rng, list(all_colors))
        return category_colors(all_colors, chosen) if chosen else []

    if palette_name == RANDOM_IN_CATEGORY and category in all_colors:
        colors = category_colors(all_colors, category)
        rng.shuffle(colors)
        subset_size = randint_between(rng, 5, min(10, len(colors)))
        return colors[:subset_size]

    if palette_name == FALLBACK_PALETTE:
        return list(FALLBACK_COLORS)

    if category in all_colors:
        return category_colors(all_colors, category)

    fallback_category = _default_category(all_colors)
    if fallback_category is not None:
        if category:
            logger.warning(
                f"Palette category {category!r} not found, using {fallback_category!r}"
            )
        return category_colors(all_colors, fallback_category)

    logger.warning(f"Could not find palette {palette_name!r} in {category!r}, using fallback")
    return list(FALLBACK_COLORS)


def resolve_palette(
    all_colors: Optional[ColorMap],
    category: str = "",
    palette_name: str = "",
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Resolve a palette selection to a non-empty list of '#RRGGBB' strings.

    Falls back from the requested category to the default category and then
    to hardcoded lists, so the result is never empty or malformed.
    """
    rng = rng or random.SystemRandom()

    if not isinstance(all_colors, Mapping) or not all_colors:
        logger.error("Color data not available, using basic fallback palette")
        return list(NO_DATA_COLORS)

    try:
        selected = _select(all_colors, category or "", palette_name or "", rng)
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Error resolving palette: {e}")
        selected = ["#AA0000", "#00AA00", "#0000AA"]

    if not selected:
        logger.warning("Palette resolved to nothing, using safety fallback")
        selected = list(SAFETY_COLORS)

    valid = [c.upper() for c in selected if is_valid_hex(c)]
    if not valid:
        logger.warning("Palette empty after hex validation, using ultimate fallback")
        valid = list(ULTIMATE_COLORS)

    return valid


def palette_names(all_colors: Optional[ColorMap]) -> List[str]:
    if not isinstance(all_colors, Mapping):
        return []
    return list(all_colors)
