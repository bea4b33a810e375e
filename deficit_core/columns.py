from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from deficit_core.filters import CategoryFilter


class TierGroup(str, Enum):
    A = "tierA"
    B = "tierB"


class RankTier(str, Enum):
    CAP = "cap"
    TEN1 = "ten1"
    TEN2 = "ten2"

    @property
    def group(self) -> TierGroup:
        return TierGroup.A if self is RankTier.CAP else TierGroup.B

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {RankTier.CAP: "CAP", RankTier.TEN1: "1º TEN", RankTier.TEN2: "2º TEN"}


class Quadro(str, Enum):
    QOEM = "qoem"
    QOE = "qoe"


@dataclass(frozen=True)
class ColumnSpec:
    header: str
    field: str
    tier: Optional[RankTier] = None
    quadro: Optional[Quadro] = None

    @property
    def is_rank(self) -> bool:
        return self.tier is not None


COLUMNS: Tuple[ColumnSpec, ...] = (
    ColumnSpec("GRANDE COMANDO", "command_unit"),
    ColumnSpec("OPM", "sub_unit"),
    ColumnSpec("DEFICIT CAP QOEM", "cap_qoem", RankTier.CAP, Quadro.QOEM),
    ColumnSpec("DEFICIT CAP QOE", "cap_qoe", RankTier.CAP, Quadro.QOE),
    ColumnSpec("DEFICIT 1º TEN QOEM", "ten1_qoem", RankTier.TEN1, Quadro.QOEM),
    ColumnSpec("DEFICIT 1º TEN QOE", "ten1_qoe", RankTier.TEN1, Quadro.QOE),
    ColumnSpec("DEFICIT 2º TEN QOEM", "ten2_qoem", RankTier.TEN2, Quadro.QOEM),
    ColumnSpec("DEFICIT 2º TEN QOE", "ten2_qoe", RankTier.TEN2, Quadro.QOE),
    ColumnSpec("DEFICIT TOTAL", "total"),
)

CANONICAL_HEADERS: Tuple[str, ...] = tuple(c.header for c in COLUMNS)
FRAME_COLUMNS: Tuple[str, ...] = tuple(c.field for c in COLUMNS)
RANK_FIELDS: Tuple[str, ...] = tuple(c.field for c in COLUMNS if c.is_rank)
TOTAL_FIELD = "total"

IDENTITY_INDICES = (0, 1)
TOTAL_INDEX = len(COLUMNS) - 1


def tier_fields(tier: RankTier) -> List[str]:
    return [c.field for c in COLUMNS if c.tier is tier]


def column_matches(spec: ColumnSpec, category: CategoryFilter) -> bool:
    """Whether a rank column is visible under ``category`` (tag match, not header text)."""
    if category is CategoryFilter.ALL:
        return True
    if spec.tier is None:
        return False
    if category is CategoryFilter.TIER_A:
        return spec.tier.group is TierGroup.A
    if category is CategoryFilter.TIER_B:
        return spec.tier.group is TierGroup.B
    if category is CategoryFilter.QOEM:
        return spec.quadro is Quadro.QOEM
    if category is CategoryFilter.QOE:
        return spec.quadro is Quadro.QOE
    return True


def retained_indices(category: CategoryFilter) -> Tuple[int, ...]:
    if category is CategoryFilter.ALL:
        return tuple(range(len(COLUMNS)))
    keep = set(IDENTITY_INDICES)
    keep.add(TOTAL_INDEX)
    for idx, spec in enumerate(COLUMNS):
        if spec.is_rank and column_matches(spec, category):
            keep.add(idx)
    return tuple(sorted(keep))


def project_row(row: Sequence[object], indices: Iterable[int]) -> tuple:
    return tuple(row[i] for i in indices)


def project(
    headers: Sequence[str],
    rows: Sequence[Sequence[object]],
    total_row: Optional[Sequence[object]],
    category: CategoryFilter,
) -> Tuple[tuple, Tuple[tuple, ...], Optional[tuple]]:
    """Apply the same column subset to headers, every row and the total row."""
    indices = retained_indices(category)
    return (
        project_row(headers, indices),
        tuple(project_row(r, indices) for r in rows),
        project_row(total_row, indices) if total_row is not None else None,
    )
