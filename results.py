"""
EcoEngine Result Types.

Structured results for valuation and comparison of cookbooks:

- Fungible / Nonfungible: outcome of valuing one commodity
- Analysis: fungible/nonfungible classification of a whole pantry
- Diff: MODIFIED / DISAPPEARING / NEW classification across two analyses
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Union
from uuid import UUID

from ecoengine.exceptions import ClassificationConflict, EcoError


class AnalysisStatus(str, Enum):
    """Classification of a commodity within one analysis."""

    FUNGIBLE = "FUNGIBLE"
    NONFUNGIBLE = "NONFUNGIBLE"


class DiffStatus(str, Enum):
    """Classification of a commodity across two analyses."""

    MODIFIED = "MODIFIED"
    DISAPPEARING = "DISAPPEARING"
    NEW = "NEW"


@dataclass(frozen=True)
class Fungible:
    """Commodity with a finite minimum acquisition cost."""

    value: Decimal

    @property
    def fungible(self) -> bool:
        return True


@dataclass(frozen=True)
class Nonfungible:
    """Commodity without any valid, cycle-free recipe chain."""

    @property
    def fungible(self) -> bool:
        return False


NONFUNGIBLE = Nonfungible()

Valuation = Union[Fungible, Nonfungible]


class Analysis:
    """
    Classification of every commodity of a pantry at one point in time.

    Append-only: a commodity id is recorded either as fungible (with its
    value) or as nonfungible, never both.

    Usage:
        analysis = Analysis()
        analysis.record_fungible(iron, Decimal("4"))
        analysis.record_nonfungible(netherite)

        analysis.is_fungible(iron)      # True
        analysis.value_of(iron)         # Decimal("4")
        analysis.nonfungible_ids()      # frozenset({netherite})
    """

    def __init__(self):
        self._fungible: dict[UUID, Decimal] = {}
        self._nonfungible: set[UUID] = set()

    def record_fungible(self, commodity: UUID, value: Decimal) -> None:
        if commodity is None:
            raise ValueError("commodity must not be None")
        if commodity in self._nonfungible:
            raise ClassificationConflict(
                commodity, current=AnalysisStatus.NONFUNGIBLE.value,
                attempted=AnalysisStatus.FUNGIBLE.value,
            )
        self._fungible[commodity] = value

    def record_nonfungible(self, commodity: UUID) -> None:
        if commodity is None:
            raise ValueError("commodity must not be None")
        if commodity in self._fungible:
            raise ClassificationConflict(
                commodity, current=AnalysisStatus.FUNGIBLE.value,
                attempted=AnalysisStatus.NONFUNGIBLE.value,
            )
        self._nonfungible.add(commodity)

    def record(self, commodity: UUID, valuation: Valuation) -> None:
        """Record a resolver outcome under the matching classification."""
        if valuation.fungible:
            self.record_fungible(commodity, valuation.value)
        else:
            self.record_nonfungible(commodity)

    def is_fungible(self, commodity: UUID) -> bool:
        return commodity in self._fungible

    def value_of(self, commodity: UUID) -> Decimal:
        """
        Value of a fungible commodity.

        Raises:
            EcoError: COMMODITY_NOT_FUNGIBLE if the commodity is nonfungible
                      or was never recorded.
        """
        try:
            return self._fungible[commodity]
        except KeyError:
            raise EcoError("COMMODITY_NOT_FUNGIBLE", commodity=str(commodity)) from None

    def valuation_of(self, commodity: UUID) -> Valuation | None:
        if commodity in self._fungible:
            return Fungible(self._fungible[commodity])
        if commodity in self._nonfungible:
            return NONFUNGIBLE
        return None

    def nonfungible_ids(self) -> frozenset[UUID]:
        return frozenset(self._nonfungible)

    @property
    def fungible(self) -> Mapping[UUID, Decimal]:
        """Read-only view of fungible commodities and their values."""
        return MappingProxyType(self._fungible)

    def commodity_ids(self) -> frozenset[UUID]:
        return frozenset(self._fungible) | frozenset(self._nonfungible)

    def as_entry(self, commodity: UUID) -> dict:
        """Wire shape for one commodity: {status, value?}."""
        if commodity in self._fungible:
            return {
                "status": AnalysisStatus.FUNGIBLE.value,
                "value": self._fungible[commodity],
            }
        return {"status": AnalysisStatus.NONFUNGIBLE.value}

    def __contains__(self, commodity) -> bool:
        return commodity in self._fungible or commodity in self._nonfungible

    def __len__(self) -> int:
        return len(self._fungible) + len(self._nonfungible)

    def __iter__(self) -> Iterator[UUID]:
        return iter(self.commodity_ids())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Analysis):
            return NotImplemented
        return (
            self._fungible == other._fungible
            and self._nonfungible == other._nonfungible
        )

    def __repr__(self) -> str:
        return (
            f"<Analysis fungible={len(self._fungible)} "
            f"nonfungible={len(self._nonfungible)}>"
        )


class Diff:
    """
    Comparison of two analyses.

    first_analysis is the older snapshot, second_analysis the newer one.
    Every commodity of the union ends in exactly one of
    modified / disappearing / new.
    """

    def __init__(self, first_analysis: Analysis, second_analysis: Analysis):
        if first_analysis is None or second_analysis is None:
            raise ValueError("both analyses are required")
        self.first_analysis = first_analysis
        self.second_analysis = second_analysis
        self._modified: dict[UUID, Decimal] = {}
        self._disappearing: set[UUID] = set()
        self._new: set[UUID] = set()

    def commodity_union(self) -> frozenset[UUID]:
        return self.first_analysis.commodity_ids() | self.second_analysis.commodity_ids()

    def _check_unclassified(self, commodity: UUID, attempted: DiffStatus) -> None:
        current = self.status_of(commodity)
        if current is not None and current is not attempted:
            raise ClassificationConflict(
                commodity, current=current.value, attempted=attempted.value
            )

    def add_modified(self, commodity: UUID, delta: Decimal) -> None:
        self._check_unclassified(commodity, DiffStatus.MODIFIED)
        self._modified[commodity] = delta

    def add_disappearing(self, commodity: UUID) -> None:
        self._check_unclassified(commodity, DiffStatus.DISAPPEARING)
        self._disappearing.add(commodity)

    def add_new(self, commodity: UUID) -> None:
        self._check_unclassified(commodity, DiffStatus.NEW)
        self._new.add(commodity)

    @property
    def modified(self) -> Mapping[UUID, Decimal]:
        return MappingProxyType(self._modified)

    @property
    def disappearing(self) -> frozenset[UUID]:
        return frozenset(self._disappearing)

    @property
    def new(self) -> frozenset[UUID]:
        return frozenset(self._new)

    def status_of(self, commodity: UUID) -> DiffStatus | None:
        if commodity in self._modified:
            return DiffStatus.MODIFIED
        if commodity in self._disappearing:
            return DiffStatus.DISAPPEARING
        if commodity in self._new:
            return DiffStatus.NEW
        return None

    def as_entry(self, commodity: UUID) -> dict:
        """
        Wire shape for one commodity.

        MODIFIED carries both analyses and the delta, DISAPPEARING only the
        first analysis, NEW only the second.
        """
        status = self.status_of(commodity)
        entry: dict = {"status": status.value if status else None}
        if status in (DiffStatus.MODIFIED, DiffStatus.DISAPPEARING):
            entry["firstAnalysis"] = self.first_analysis.as_entry(commodity)
        if status in (DiffStatus.MODIFIED, DiffStatus.NEW):
            entry["secondAnalysis"] = self.second_analysis.as_entry(commodity)
        if status is DiffStatus.MODIFIED:
            entry["diff"] = self._modified[commodity]
        return entry

    def __len__(self) -> int:
        return len(self._modified) + len(self._disappearing) + len(self._new)

    def __repr__(self) -> str:
        return (
            f"<Diff modified={len(self._modified)} "
            f"disappearing={len(self._disappearing)} new={len(self._new)}>"
        )
