from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from deficit_core.aggregate import DeficitSummary, compute_summary, compute_total_row
from deficit_core.columns import CANONICAL_HEADERS, project
from deficit_core.data import Row, command_options, frame_rows, load_deficit_data
from deficit_core.filters import (
    ALL,
    CategoryFilter,
    SortDirection,
    ViewParameters,
    filter_records,
    parse_category,
    resolve_sub_unit,
    sub_unit_options,
)
from deficit_core.sorting import sort_rows


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortIndicator:
    key: str
    direction: SortDirection
    column_index: Optional[int] = None


@dataclass(frozen=True)
class DerivedView:
    headers: Tuple[str, ...]
    rows: Tuple[Row, ...]
    total_row: Optional[Row]
    summary: DeficitSummary
    sort_indicator: SortIndicator

    def to_payload(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [list(r) for r in self.rows],
            "total_row": list(self.total_row) if self.total_row is not None else None,
            "summary": asdict(self.summary),
            "sort_indicator": {
                "key": self.sort_indicator.key,
                "direction": self.sort_indicator.direction.value,
                "column_index": self.sort_indicator.column_index,
            },
        }


def build_view(frame: pd.DataFrame, params: ViewParameters) -> DerivedView:
    """Filter -> aggregate -> sort (full width) -> project, as one pure pass."""
    filtered = filter_records(frame, params.command_filter, params.sub_unit_filter)

    summary = compute_summary(filtered)
    total_row = compute_total_row(filtered)

    rows = sort_rows(frame_rows(filtered), params.sort_key, params.sort_direction, CANONICAL_HEADERS)
    headers, projected_rows, projected_total = project(CANONICAL_HEADERS, rows, total_row, params.category_filter)

    column_index = headers.index(params.sort_key) if params.sort_key in headers else None
    return DerivedView(
        headers=headers,
        rows=projected_rows,
        total_row=projected_total,
        summary=summary,
        sort_indicator=SortIndicator(params.sort_key, params.sort_direction, column_index),
    )


def toggle_sort(params: ViewParameters, header_key: str) -> ViewParameters:
    if header_key == params.sort_key:
        return replace(params, sort_direction=params.sort_direction.toggled())
    return replace(params, sort_key=header_key, sort_direction=SortDirection.ASCENDING)


def apply_filter_changes(
    frame: pd.DataFrame,
    params: ViewParameters,
    *,
    command_filter: Optional[str] = None,
    sub_unit_filter: Optional[str] = None,
    category_filter: Optional[object] = None,
) -> ViewParameters:
    updated = params
    if command_filter is not None:
        command_filter = str(command_filter).strip() or ALL
        if command_filter != params.command_filter:
            # A new command always clears the sub-unit selection.
            updated = replace(updated, command_filter=command_filter, sub_unit_filter=ALL)
    if sub_unit_filter is not None:
        updated = replace(
            updated,
            sub_unit_filter=resolve_sub_unit(frame, updated.command_filter, sub_unit_filter),
        )
    if category_filter is not None:
        updated = replace(updated, category_filter=parse_category(category_filter))
    return updated


class DeficitDashboard:
    """Owns the current view parameters and the last computed view."""

    def __init__(self, frame: Optional[pd.DataFrame] = None, params: Optional[ViewParameters] = None):
        if frame is None:
            frame = load_deficit_data()["frame"]
        self._frame = frame
        self._params = params or ViewParameters()
        self._cached: Optional[Tuple[ViewParameters, DerivedView]] = None

    @property
    def params(self) -> ViewParameters:
        return self._params

    def command_options(self) -> List[str]:
        return command_options(self._frame)

    def sub_unit_options(self) -> List[str]:
        return sub_unit_options(self._frame, self._params.command_filter)

    def view(self) -> DerivedView:
        if self._cached is not None and self._cached[0] == self._params:
            logger.debug("Reusing view for %s", self._params)
            return self._cached[1]
        logger.debug("Recomputing view for %s", self._params)
        view = build_view(self._frame, self._params)
        self._cached = (self._params, view)
        return view

    def change_sort(self, header_key: str) -> DerivedView:
        self._params = toggle_sort(self._params, header_key)
        return self.view()

    def change_filters(
        self,
        command_filter: Optional[str] = None,
        sub_unit_filter: Optional[str] = None,
        category_filter: Optional[CategoryFilter | str] = None,
    ) -> DerivedView:
        self._params = apply_filter_changes(
            self._frame,
            self._params,
            command_filter=command_filter,
            sub_unit_filter=sub_unit_filter,
            category_filter=category_filter,
        )
        return self.view()
