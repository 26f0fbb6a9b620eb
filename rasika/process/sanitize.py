"""Normalize raw model output into RecommendationItem objects.

Nothing in here raises: every field has a defined fallback, so whatever the
model returned, the caller always gets a complete item.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Union

from rasika.constants import (
    NO_SUMMARY,
    SCREEN_CONTENT_TYPES,
    UNKNOWN_CONTENT_TYPE,
    UNTITLED_RECOMMENDATION,
)
from rasika.schemas.recommendations.recommendations import (
    RecommendationItem,
    normalize_content_type,
)
from rasika.utils.logger import get_logger

logger = get_logger(__name__)

NULL_LIKE_STRINGS = {"", "null", "n/a", "none"}

NULLABLE_STRING_FIELDS = (
    "rating",
    "ratingSource",
    "streamingInfo",
    "director",
    "cast",
    "author",
    "artist",
    "creatorOrHost",
    "keyCreatorForSimilar",
)

# where to look for the key creator when the model left it out, in order
KEY_CREATOR_SOURCES = {
    "movie": ("director",),
    "tvShow": ("director", "creator_or_host"),
    "anime": ("director", "author"),
    "book": ("author",),
    "music": ("artist",),
    "podcast": ("creator_or_host",),
}

_RATING_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(%|/\s*(\d+(?:\.\d+)?))?")


def sanitize_nullable_string(value: Any) -> Optional[str]:
    """Trim a value and collapse placeholder text ("null", "n/a", "none", blank) to None."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        parts = [sanitize_nullable_string(v) for v in value]
        value = ", ".join(p for p in parts if p)
    text = str(value).strip()
    if text.lower() in NULL_LIKE_STRINGS:
        return None
    return text


def sanitize_required_string(value: Any) -> Optional[str]:
    """Trim a required field; only an absent or blank value is missing."""
    if value is None:
        return None
    return str(value).strip() or None


def sanitize_nullable_number(value: Any) -> Optional[Union[int, float]]:
    """Keep finite numbers (or numeric strings); everything else becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def derive_key_creator(item: RecommendationItem) -> Optional[str]:
    for field in KEY_CREATOR_SOURCES.get(item.content_type, ()):
        value = getattr(item, field)
        if value:
            # "Denis Villeneuve, Jordan Peele" -> "Denis Villeneuve"
            return value.split(",")[0].strip() or None
    return None


def sanitize_recommendation_item(raw: Any) -> RecommendationItem:
    """Build a RecommendationItem from one loosely-typed model output object."""
    if isinstance(raw, RecommendationItem):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        logger.warning("Recommendation item is not an object, using defaults: %r", raw)
        raw = {}

    raw_type = raw.get("contentType")
    content_type = (
        normalize_content_type(raw_type)
        or sanitize_nullable_string(raw_type)
        or UNKNOWN_CONTENT_TYPE
    )

    item = RecommendationItem(
        title=sanitize_required_string(raw.get("title")) or UNTITLED_RECOMMENDATION,
        content_type=content_type,
        summary=sanitize_required_string(raw.get("summary")) or NO_SUMMARY,
        release_year=sanitize_nullable_number(raw.get("releaseYear")),
        # populate_by_name lets the camelCase aliases through as keywords
        **{name: sanitize_nullable_string(raw.get(name)) for name in NULLABLE_STRING_FIELDS},
    )
    if item.key_creator_for_similar is None:
        item.key_creator_for_similar = derive_key_creator(item)
    return item


def sanitize_recommendations(raw_items: Any) -> List[RecommendationItem]:
    """Sanitize every element of an array-shaped output; anything else yields []."""
    if not isinstance(raw_items, (list, tuple)):
        logger.warning("Model output was not an array, treating as empty: %r", raw_items)
        return []
    return [sanitize_recommendation_item(r) for r in raw_items]


def rating_on_ten_point_scale(rating: Optional[str]) -> Optional[float]:
    """Parse "8.5/10", "4.2/5 stars", "87%" or "7.9" into a 0-10 value, or None.

    A number with a scale wins over bare numbers ("Season 9: 6.9/10" is 6.9).
    Without a scaled match, exactly one bare number is read on the 10-point
    scale; several bare numbers are ambiguous and give None.
    """
    if not rating:
        return None
    matches = list(_RATING_PATTERN.finditer(rating))
    scaled = [m for m in matches if m.group(2)]
    if scaled:
        match = scaled[0]
    elif len(matches) == 1:
        match = matches[0]
    else:
        return None
    value = float(match.group(1))
    if match.group(2) == "%":
        scale = 100.0
    elif match.group(3):
        scale = float(match.group(3))
    else:
        scale = 10.0
    if scale <= 0:
        return None
    scaled_value = value * 10.0 / scale
    if scaled_value > 10:
        return None
    return scaled_value


def enforce_rating_floor(item: RecommendationItem, threshold: Optional[float]) -> RecommendationItem:
    """Null the rating of a screen-media item that cannot be shown to meet the threshold."""
    if threshold is None or item.content_type not in SCREEN_CONTENT_TYPES:
        return item
    if item.rating is None:
        if item.rating_source is None:
            return item
        # a source without a rating says nothing about the threshold
        return item.model_copy(update={"rating_source": None})
    value = rating_on_ten_point_scale(item.rating)
    if value is not None and value >= threshold:
        return item
    logger.info(
        "Dropping rating %r for '%s': below or not comparable to threshold %s",
        item.rating, item.title, threshold,
    )
    return item.model_copy(update={"rating": None, "rating_source": None})


def conform_content_type(item: RecommendationItem, requested: Iterable[str]) -> Optional[RecommendationItem]:
    """Return the item with a content type from the requested set, or None if none fits."""
    requested = list(requested)
    if item.content_type in requested:
        return item
    if len(requested) == 1 and item.content_type == UNKNOWN_CONTENT_TYPE:
        fixed = item.model_copy(update={"content_type": requested[0]})
        if fixed.key_creator_for_similar is None:
            fixed.key_creator_for_similar = derive_key_creator(fixed)
        return fixed
    logger.warning(
        "Discarding '%s': content type %r not among requested %s",
        item.title, item.content_type, requested,
    )
    return None
