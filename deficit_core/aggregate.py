from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from deficit_core.columns import RANK_FIELDS, TOTAL_FIELD, RankTier, tier_fields
from deficit_core.data import Row


TOTAL_LABEL = "TOTAL"


@dataclass(frozen=True)
class DeficitSummary:
    total_deficit: int = 0
    deficit_tier_a: int = 0
    deficit_tier_b1: int = 0
    deficit_tier_b2: int = 0


def _column_sum(frame: pd.DataFrame, col: str) -> int:
    if frame.empty or col not in frame.columns:
        return 0
    total = pd.to_numeric(frame[col], errors="coerce").sum(skipna=True)
    return int(total) if pd.notna(total) else 0


def _tier_sum(frame: pd.DataFrame, tier: RankTier) -> int:
    return sum(_column_sum(frame, col) for col in tier_fields(tier))


def compute_summary(frame: pd.DataFrame) -> DeficitSummary:
    """Card totals over the location-filtered records."""
    return DeficitSummary(
        total_deficit=_column_sum(frame, TOTAL_FIELD),
        deficit_tier_a=_tier_sum(frame, RankTier.CAP),
        deficit_tier_b1=_tier_sum(frame, RankTier.TEN1),
        deficit_tier_b2=_tier_sum(frame, RankTier.TEN2),
    )


def compute_total_row(frame: pd.DataFrame) -> Row:
    sums = [_column_sum(frame, col) for col in RANK_FIELDS + (TOTAL_FIELD,)]
    return (TOTAL_LABEL, "", *sums)
