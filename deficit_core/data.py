from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from deficit_core.columns import FRAME_COLUMNS, RANK_FIELDS, TOTAL_FIELD


CellValue = Union[str, int, None]
Row = Tuple[CellValue, ...]


@dataclass(frozen=True)
class DeficitCounts:
    cap_qoem: Optional[int] = 0
    cap_qoe: Optional[int] = 0
    ten1_qoem: Optional[int] = 0
    ten1_qoe: Optional[int] = 0
    ten2_qoem: Optional[int] = 0
    ten2_qoe: Optional[int] = 0
    total: Optional[int] = 0


@dataclass(frozen=True)
class DeficitRecord:
    command_unit: str
    sub_unit: str
    deficit: DeficitCounts = field(default_factory=DeficitCounts)


def _record(command_unit: str, sub_unit: str, *counts: int) -> DeficitRecord:
    return DeficitRecord(command_unit, sub_unit, DeficitCounts(*counts, sum(counts)))


# Budgeted minus actual officers per OPM; columns follow RANK_FIELDS.
DEFICIT_RECORDS: Tuple[DeficitRecord, ...] = (
    _record("CPC", "1º BPM", 2, 1, 3, 0, 4, 1),
    _record("CPC", "5º BPM", 1, 0, 2, 1, 3, 0),
    _record("CPC", "9º BPM", 0, 1, 1, 0, 2, 2),
    _record("CPC", "BPCHOQUE", 1, 0, 0, 0, 1, 0),
    _record("CPM", "4º BPM", 3, 1, 2, 2, 5, 1),
    _record("CPM", "7º BPM", 1, 1, 0, 1, 2, 0),
    _record("CPM", "12º BPM", 2, 0, 3, 1, 4, 2),
    _record("CPI", "2º BPM", 1, 0, 1, 1, 3, 1),
    _record("CPI", "3º BPM", 0, 0, 2, 0, 1, 1),
    _record("CPI", "6º BPM", 2, 1, 1, 0, 2, 0),
    _record("CPI", "8º BPM", 1, 1, 1, 1, 1, 1),
    _record("CPI", "10º BPM", 0, 0, 0, 0, 0, 0),
)


def records_frame(records: Iterable[DeficitRecord]) -> pd.DataFrame:
    """One row per record, columns in canonical header order."""
    rows = []
    for rec in records:
        row = {"command_unit": rec.command_unit, "sub_unit": rec.sub_unit}
        for col in RANK_FIELDS + (TOTAL_FIELD,):
            row[col] = getattr(rec.deficit, col)
        rows.append(row)
    df = pd.DataFrame(rows, columns=list(FRAME_COLUMNS))
    df["command_unit"] = df["command_unit"].astype(object)
    df["sub_unit"] = df["sub_unit"].astype(object)
    for col in RANK_FIELDS + (TOTAL_FIELD,):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    return df


def _cell(value: object) -> CellValue:
    if value is None or value is pd.NA:
        return None
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    return int(value)


def frame_rows(frame: pd.DataFrame) -> List[Row]:
    """Full-width table rows (str | int | None cells) in frame order."""
    if frame.empty:
        return []
    return [tuple(_cell(v) for v in values) for values in frame[list(FRAME_COLUMNS)].itertuples(index=False, name=None)]


def command_options(frame: pd.DataFrame) -> List[str]:
    if frame.empty:
        return []
    return [str(x) for x in frame["command_unit"].dropna().unique()]


@lru_cache(maxsize=1)
def _load_deficit_data_cached() -> Dict[str, object]:
    frame = records_frame(DEFICIT_RECORDS)
    return {
        "records": DEFICIT_RECORDS,
        "frame": frame,
        "commands": command_options(frame),
    }


def load_deficit_data() -> Dict[str, object]:
    return _load_deficit_data_cached()
