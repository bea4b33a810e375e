from __future__ import annotations

import math
import numbers
import unicodedata
from enum import Enum
from functools import cmp_to_key
from typing import List, Sequence, Tuple

from deficit_core.columns import CANONICAL_HEADERS
from deficit_core.filters import SortDirection


class CellKind(Enum):
    NUMBER = "number"
    TEXT = "text"
    MISSING = "missing"


def cell_kind(value: object) -> CellKind:
    if isinstance(value, str):
        return CellKind.TEXT
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        if isinstance(value, numbers.Real) and math.isnan(value):
            return CellKind.MISSING
        return CellKind.NUMBER
    return CellKind.MISSING


def collation_key(text: str) -> Tuple[str, str]:
    """Accent- and case-insensitive key, with the raw string as tiebreak."""
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, text


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_cells(a: object, b: object, direction: SortDirection) -> int:
    kind_a, kind_b = cell_kind(a), cell_kind(b)

    # Missing values go last whatever the direction.
    if kind_a is CellKind.MISSING and kind_b is CellKind.MISSING:
        return 0
    if kind_a is CellKind.MISSING:
        return 1
    if kind_b is CellKind.MISSING:
        return -1

    if kind_a is not kind_b:
        return 0
    if kind_a is CellKind.TEXT:
        result = _cmp(collation_key(a), collation_key(b))
    else:
        result = _cmp(a, b)
    return result if direction is SortDirection.ASCENDING else -result


def sort_key_index(sort_key: str, headers: Sequence[str] = CANONICAL_HEADERS) -> int:
    try:
        return list(headers).index(sort_key)
    except ValueError:
        return -1


def sort_rows(
    rows: Sequence[Sequence[object]],
    sort_key: str,
    direction: SortDirection,
    headers: Sequence[str] = CANONICAL_HEADERS,
) -> List[Sequence[object]]:
    """Order full-width rows by one column; an unknown key keeps input order."""
    idx = sort_key_index(sort_key, headers)
    if idx == -1:
        return list(rows)
    return sorted(rows, key=cmp_to_key(lambda r1, r2: compare_cells(r1[idx], r2[idx], direction)))
