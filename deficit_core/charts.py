from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

from deficit_core.columns import COLUMNS, RANK_FIELDS

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def deficit_by_sub_unit_chart(frame: pd.DataFrame) -> alt.Chart:
    """Stacked bar of deficit per OPM, split by rank tier."""
    tier_by_field = {c.field: c.tier.label for c in COLUMNS if c.is_rank}
    long = frame.melt(
        id_vars=["command_unit", "sub_unit"],
        value_vars=list(RANK_FIELDS),
        var_name="column",
        value_name="deficit",
    )
    long["tier"] = long["column"].map(tier_by_field)
    long["deficit"] = pd.to_numeric(long["deficit"], errors="coerce").fillna(0).astype(int)
    long = long.groupby(["command_unit", "sub_unit", "tier"], as_index=False)["deficit"].sum()
    return (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("sub_unit:N", title="OPM", sort="-y"),
            y=alt.Y("sum(deficit):Q", title="Déficit"),
            color=alt.Color("tier:N", title="Posto"),
            tooltip=["command_unit", "sub_unit", "tier", alt.Tooltip("sum(deficit):Q", title="Déficit")],
        )
    )
