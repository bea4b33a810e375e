from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import pandas as pd


logger = logging.getLogger(__name__)

ALL = "all"
DEFAULT_SORT_KEY = "DEFICIT TOTAL"


class CategoryFilter(str, Enum):
    ALL = "all"
    TIER_A = "tierA"
    TIER_B = "tierB"
    QOEM = "qoem"
    QOE = "qoe"


_CATEGORY_ALIASES = {
    "all": CategoryFilter.ALL,
    "todos": CategoryFilter.ALL,
    "tiera": CategoryFilter.TIER_A,
    "cap": CategoryFilter.TIER_A,
    "tierb": CategoryFilter.TIER_B,
    "ten": CategoryFilter.TIER_B,
    "qoem": CategoryFilter.QOEM,
    "qoe": CategoryFilter.QOE,
}


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggled(self) -> "SortDirection":
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class ViewParameters:
    command_filter: str = ALL
    sub_unit_filter: str = ALL
    category_filter: CategoryFilter = CategoryFilter.ALL
    sort_key: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = SortDirection.DESCENDING


def parse_category(value: object) -> CategoryFilter:
    if isinstance(value, CategoryFilter):
        return value
    key = str(value or "").strip().lower()
    category = _CATEGORY_ALIASES.get(key)
    if category is None:
        logger.debug("Unknown category filter %r, falling back to 'all'", value)
        return CategoryFilter.ALL
    return category


def parse_direction(value: object) -> SortDirection:
    if isinstance(value, SortDirection):
        return value
    try:
        return SortDirection(str(value or "").strip().lower())
    except ValueError:
        logger.debug("Unknown sort direction %r, falling back to 'ascending'", value)
        return SortDirection.ASCENDING


def _as_filter_value(value: object) -> str:
    if value is None:
        return ALL
    s = str(value).strip()
    return s or ALL


def normalize_view_params(raw: dict) -> ViewParameters:
    raw = raw or {}
    sort_key = str(raw.get("sort_key") or "").strip() or DEFAULT_SORT_KEY
    direction = raw.get("sort_direction")
    return ViewParameters(
        command_filter=_as_filter_value(raw.get("command_filter")),
        sub_unit_filter=_as_filter_value(raw.get("sub_unit_filter")),
        category_filter=parse_category(raw.get("category_filter", ALL)),
        sort_key=sort_key,
        sort_direction=parse_direction(direction) if direction is not None else SortDirection.DESCENDING,
    )


def filter_records(frame: pd.DataFrame, command_filter: str, sub_unit_filter: str) -> pd.DataFrame:
    if frame.empty:
        return frame
    mask = pd.Series(True, index=frame.index)
    if command_filter != ALL:
        mask &= frame["command_unit"] == command_filter
    if sub_unit_filter != ALL:
        mask &= frame["sub_unit"] == sub_unit_filter
    return frame.loc[mask]


def sub_unit_options(frame: pd.DataFrame, command_filter: str) -> List[str]:
    """Sorted distinct sub-units selectable under ``command_filter``."""
    if frame.empty:
        return []
    scoped = filter_records(frame, command_filter, ALL)
    return sorted(str(x) for x in scoped["sub_unit"].dropna().unique())


def resolve_sub_unit(frame: pd.DataFrame, command_filter: str, sub_unit_filter: Optional[str]) -> str:
    value = _as_filter_value(sub_unit_filter)
    if value == ALL:
        return ALL
    if value not in sub_unit_options(frame, command_filter):
        logger.debug("Sub-unit %r not available under command %r, resetting", value, command_filter)
        return ALL
    return value
