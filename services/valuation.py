"""
Commodity valuation -- cheapest cycle-free recipe chain per commodity.

Given a RecipeGraphSnapshot, values every commodity of the pantry as the
minimum total cost over the recipes producing it. A recipe is usable only
if none of its ingredients is already being resolved (cycle guard) and
every ingredient is itself fungible.

Cost combination per work method:
    PURCHASE:                       ingredient cost + recipe cost
    OBTAIN, CRAFT, SMELT, WAIT, SELL: ingredient cost × recipe cost

Resolution is written as a generator per commodity: instead of recursing,
a resolver yields the ingredient it needs and receives its outcome back.
_drive() runs those generators on an explicit stack, so chain length is
bounded by memory rather than by the interpreter's recursion limit.

Usage:
    from ecoengine.services import ValuationEngine

    analysis = ValuationEngine(snapshot).analyze()
    analysis.value_of(iron_ingot)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, Context, Decimal, localcontext
from typing import AbstractSet, Generator
from uuid import UUID

from ecoengine.protocols.snapshot import FrozenRecipe, RecipeGraphSnapshot
from ecoengine.results import NONFUNGIBLE, Analysis, Fungible, Valuation

logger = logging.getLogger(__name__)

ADDITIVE_WORK = frozenset({"PURCHASE"})

# Significant digits kept by valuation arithmetic (decimal's own default)
DEFAULT_PRECISION = 28


@dataclass(frozen=True)
class _Resolution:
    """
    Resolver outcome plus whether it depended on the path it was resolved
    under (some recipe in its subtree was skipped by the cycle guard).
    """

    valuation: Valuation
    path_dependent: bool = False


_Resolver = Generator[UUID, _Resolution, _Resolution]


def value_context(precision: int = DEFAULT_PRECISION) -> Context:
    """Decimal context for valuation: fixed precision, unbounded exponent."""
    return Context(prec=precision, Emax=MAX_EMAX, Emin=MIN_EMIN)


def combine_cost(recipe: FrozenRecipe, ingredient_cost: Decimal) -> Decimal:
    """
    Combine the summed ingredient cost with the recipe's own cost.

    Runs in the current decimal context: inside an engine that is
    value_context(precision), so results of long multiplicative chains are
    rounded to that many significant digits.
    """
    if recipe.work in ADDITIVE_WORK:
        return ingredient_cost + recipe.cost
    return ingredient_cost * recipe.cost


class ValuationEngine:
    """
    Minimum-cost resolver over one snapshot.

    Stateless between analyze() calls: every call builds its own Analysis
    and memo, so one engine may be shared across threads.
    """

    def __init__(
        self,
        snapshot: RecipeGraphSnapshot,
        *,
        memoize: bool = True,
        precision: int = DEFAULT_PRECISION,
    ):
        self.snapshot = snapshot
        self.memoize = memoize
        self.precision = precision

    def analyze(self) -> Analysis:
        """Classify every commodity in the pantry as fungible or nonfungible."""
        analysis = Analysis()
        memo: dict[UUID, _Resolution] = {}

        with localcontext(value_context(self.precision)):
            for commodity in sorted(self.snapshot.pantry, key=str):
                resolution = self._drive(commodity, memo)
                analysis.record(commodity, resolution.valuation)

        logger.info(
            f"Analyzed {len(analysis)} commodities",
            extra={
                "cookbook": str(self.snapshot.cookbook),
                "fungible": len(analysis.fungible),
                "nonfungible": len(analysis.nonfungible_ids()),
            },
        )
        return analysis

    def value_of(self, commodity: UUID) -> Valuation:
        """Value a single commodity, starting from an empty path."""
        with localcontext(value_context(self.precision)):
            return self._drive(commodity, {}).valuation

    # ── resolution ──

    def _drive(self, commodity: UUID, memo: dict[UUID, _Resolution]) -> _Resolution:
        """
        Run the resolver for commodity to completion on an explicit stack.

        The commodities on the stack are exactly the path of the resolver
        on top, so one shared set serves as the path of every resolver.
        """
        path: set[UUID] = {commodity}
        stack: list[tuple[UUID, _Resolver]] = [(commodity, self._resolve(commodity, path))]
        reply: _Resolution | None = None

        while True:
            current, resolver = stack[-1]
            try:
                ingredient = resolver.send(reply)
            except StopIteration as done:
                stack.pop()
                path.discard(current)
                reply = done.value
                if self.memoize and not reply.path_dependent:
                    memo[current] = reply
                if not stack:
                    return reply
                continue

            cached = memo.get(ingredient) if self.memoize else None
            if cached is not None:
                reply = cached
            else:
                path.add(ingredient)
                stack.append((ingredient, self._resolve(ingredient, path)))
                reply = None

    def _resolve(self, commodity: UUID, path: AbstractSet[UUID]) -> _Resolver:
        """
        Resolve commodity while every commodity in path is being resolved.

        path already holds commodity itself. Yields ingredient requests
        and receives their _Resolution.
        """
        recipes = self.snapshot.recipes_for(commodity)
        if not recipes:
            logger.debug("Commodity %s has no recipes, nonfungible.", commodity)
            return _Resolution(NONFUNGIBLE)

        path_dependent = False
        best: Decimal | None = None

        for recipe in recipes:
            if recipe.ingredient_ids & path:
                path_dependent = True
                continue

            ingredient_cost = Decimal("0")
            usable = True
            for ingredient, quantity in recipe.ingredients:
                outcome = yield ingredient
                path_dependent = path_dependent or outcome.path_dependent
                if not outcome.valuation.fungible:
                    usable = False
                    break
                ingredient_cost += outcome.valuation.value * quantity

            if not usable:
                continue

            total = combine_cost(recipe, ingredient_cost)
            if best is None or total < best:
                best = total

        if best is None:
            logger.debug("Commodity %s has no usable recipe, nonfungible.", commodity)
            return _Resolution(NONFUNGIBLE, path_dependent)
        return _Resolution(Fungible(best), path_dependent)


def analyze(
    snapshot: RecipeGraphSnapshot,
    *,
    memoize: bool = True,
    precision: int = DEFAULT_PRECISION,
) -> Analysis:
    """Shortcut for ValuationEngine(snapshot).analyze()."""
    return ValuationEngine(snapshot, memoize=memoize, precision=precision).analyze()
