"""
Analysis comparison -- what changed between two valuations.

Every commodity recorded in either analysis is classified exactly once:

    in both pantries        →  MODIFIED (delta = newer value − older value,
                               a nonfungible side counting as 0)
    in the older pantry only →  DISAPPEARING
    in the newer pantry only →  NEW
"""

from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import AbstractSet
from uuid import UUID

from ecoengine.exceptions import EcoError
from ecoengine.results import Analysis, Diff
from ecoengine.services.valuation import DEFAULT_PRECISION, value_context

logger = logging.getLogger(__name__)


class DiffEngine:
    """Builds a Diff from two analyses and the pantries they were computed on."""

    @classmethod
    def diff(
        cls,
        older_pantry: AbstractSet[UUID],
        older_analysis: Analysis,
        newer_pantry: AbstractSet[UUID],
        newer_analysis: Analysis,
        *,
        precision: int = DEFAULT_PRECISION,
    ) -> Diff:
        result = Diff(older_analysis, newer_analysis)

        with localcontext(value_context(precision)):
            cls._classify(result, older_pantry, older_analysis, newer_pantry, newer_analysis)

        logger.info(
            f"Computed diff over {len(result)} commodities",
            extra={
                "modified": len(result.modified),
                "disappearing": len(result.disappearing),
                "new": len(result.new),
            },
        )
        return result

    @classmethod
    def _classify(cls, result, older_pantry, older_analysis, newer_pantry, newer_analysis):
        for commodity in sorted(result.commodity_union(), key=str):
            in_older = commodity in older_pantry
            in_newer = commodity in newer_pantry

            if in_older and in_newer:
                result.add_modified(
                    commodity,
                    cls._value_or_zero(newer_analysis, commodity)
                    - cls._value_or_zero(older_analysis, commodity),
                )
            elif in_older:
                result.add_disappearing(commodity)
            elif in_newer:
                result.add_new(commodity)
            else:
                raise EcoError("GHOST_COMMODITY", commodity=str(commodity))

    @staticmethod
    def _value_or_zero(analysis: Analysis, commodity: UUID) -> Decimal:
        if analysis.is_fungible(commodity):
            return analysis.value_of(commodity)
        return Decimal("0")


def diff(
    older_pantry: AbstractSet[UUID],
    older_analysis: Analysis,
    newer_pantry: AbstractSet[UUID],
    newer_analysis: Analysis,
    *,
    precision: int = DEFAULT_PRECISION,
) -> Diff:
    """Shortcut for DiffEngine.diff()."""
    return DiffEngine.diff(
        older_pantry, older_analysis, newer_pantry, newer_analysis, precision=precision
    )
