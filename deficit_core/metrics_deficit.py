from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from deficit_core.charts import deficit_by_sub_unit_chart, to_vega_spec
from deficit_core.data import command_options
from deficit_core.filters import CategoryFilter, ViewParameters, filter_records, sub_unit_options
from deficit_core.view import DerivedView, build_view


def view_to_frame(view: DerivedView) -> pd.DataFrame:
    """Projected table with the total row appended last."""
    rows = list(view.rows)
    if view.total_row is not None:
        rows.append(view.total_row)
    return pd.DataFrame(rows, columns=list(view.headers))


def compute_deficit(
    params: ViewParameters,
    ctx: Dict[str, Any],
    *,
    view: Optional[DerivedView] = None,
) -> Dict[str, Any]:
    frame: pd.DataFrame = ctx.get("frame", pd.DataFrame())
    if view is None:
        view = build_view(frame, params)

    filtered = filter_records(frame, params.command_filter, params.sub_unit_filter)
    charts = {}
    if not filtered.empty:
        charts["deficit_by_sub_unit"] = to_vega_spec(deficit_by_sub_unit_chart(filtered))

    return {
        "filters": asdict(params),
        "options": {
            "commands": command_options(frame),
            "sub_units": sub_unit_options(frame, params.command_filter),
            "categories": [c.value for c in CategoryFilter],
        },
        "view": view.to_payload(),
        "charts": charts,
    }
