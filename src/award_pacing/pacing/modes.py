"""Sort and filter modes for the award item list."""

from enum import Enum


class UnknownModeError(ValueError):
    """Raised when a caller asks for a sort, filter or format that doesn't exist."""


class SortMode(str, Enum):
    """Item ordering."""

    PRIORITY = "priority"
    ALPHA = "alpha"


class FilterMode(str, Enum):
    """Item subset."""

    ALL = "all"
    RISK = "risk"
    HIGH = "high"


def normalize_sort_mode(mode: str | SortMode | None) -> SortMode:
    """Resolve a sort mode, defaulting to priority for empty input.

    Raises:
        UnknownModeError: If the mode is not recognized.
    """
    if isinstance(mode, SortMode):
        return mode
    normalized = (mode or "").strip().lower()
    if not normalized:
        return SortMode.PRIORITY
    try:
        return SortMode(normalized)
    except ValueError as e:
        msg = f"unknown sort mode: {mode}"
        raise UnknownModeError(msg) from e


def normalize_filter_mode(mode: str | FilterMode | None) -> FilterMode:
    """Resolve a filter mode, defaulting to all for empty input.

    Raises:
        UnknownModeError: If the mode is not recognized.
    """
    if isinstance(mode, FilterMode):
        return mode
    normalized = (mode or "").strip().lower()
    if not normalized:
        return FilterMode.ALL
    try:
        return FilterMode(normalized)
    except ValueError as e:
        msg = f"unknown filter mode: {mode}"
        raise UnknownModeError(msg) from e
