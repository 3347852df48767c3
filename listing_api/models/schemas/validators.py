"""Shared validators for Pydantic schemas.

Listing requests arrive from many older clients, so the paging knobs are
coerced rather than rejected. Anything that is not a usable value becomes
``None`` and the engine falls back to its default.
"""

from typing import Any, Optional

from listing_api.core.config import settings


def coerce_positive_int(v: Any) -> Optional[int]:
    """Coerce a page or limit value to a positive int.

    Accepts ints, integral floats and numeric strings. Booleans, zero,
    negatives and anything non-numeric yield None.
    """
    if v is None or isinstance(v, bool):
        return None

    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
        try:
            v = int(v)
        except ValueError:
            try:
                v = float(v)
            except ValueError:
                return None

    if isinstance(v, float):
        try:
            if not v.is_integer():
                return None
            v = int(v)
        except (OverflowError, ValueError):
            return None

    if not isinstance(v, int):
        return None

    return v if v >= 1 else None


def normalize_sort_direction(v: Any) -> Optional[str]:
    """Map direction spellings onto ``asc``/``desc``; unknown values yield None."""
    if not isinstance(v, str):
        return None

    v = v.strip().lower()
    if v in ("asc", "ascending"):
        return "asc"
    if v in ("desc", "descending"):
        return "desc"
    return None


def normalize_sort_field(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    v = v.strip()
    return v or None


def normalize_search_term(v: Optional[str]) -> Optional[str]:
    """Strip a free-text search term.

    Args:
        v: Raw term from the request

    Returns:
        Stripped term or None if empty

    Raises:
        ValueError: If the term exceeds the configured maximum length
    """
    if v is None:
        return v

    v = v.strip()
    if not v:
        return None

    if len(v) > settings.SEARCH_MAX_TERM_LENGTH:
        raise ValueError(
            f"Search term must be at most {settings.SEARCH_MAX_TERM_LENGTH} characters"
        )

    return v
