from __future__ import annotations

import pandas as pd
import pytest

from deficit_core.data import DEFICIT_RECORDS, DeficitCounts, DeficitRecord, records_frame


@pytest.fixture
def example_records() -> list[DeficitRecord]:
    return [
        DeficitRecord("A", "X", DeficitCounts(2, 1, 0, 0, 0, 0, 3)),
        DeficitRecord("A", "Y", DeficitCounts(1, 1, 1, 0, 0, 0, 3)),
    ]


@pytest.fixture
def example_frame(example_records) -> pd.DataFrame:
    return records_frame(example_records)


@pytest.fixture
def store_frame() -> pd.DataFrame:
    return records_frame(DEFICIT_RECORDS)


@pytest.fixture
def sparse_frame() -> pd.DataFrame:
    return records_frame(
        [
            DeficitRecord("A", "X", DeficitCounts(2, None, 0, 0, 0, 0, 2)),
            DeficitRecord("A", "Y", DeficitCounts(None, 1, 1, 0, 0, 0, 2)),
            DeficitRecord("B", "Z", DeficitCounts(5, 0, 0, 0, 0, 0, 5)),
            DeficitRecord("B", "W", DeficitCounts(1, 0, 0, 0, 0, 0, 1)),
        ]
    )
