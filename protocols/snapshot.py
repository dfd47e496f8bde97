"""
Snapshot Protocol: interface for reading one cookbook's recipe graph.

EcoEngine defines this protocol; the ORM adapter (or any other store)
implements it. The valuation engine only ever sees the immutable
RecipeGraphSnapshot, never the store behind it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, runtime_checkable
from uuid import UUID

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════
# DATA TYPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FrozenRecipe:
    """Immutable view of one recipe as the valuation engine sees it."""

    id: UUID
    product: UUID
    work: str
    cost: Decimal
    ingredients: tuple[tuple[UUID, int], ...] = ()
    yield_quantity: int = 1

    @classmethod
    def of(
        cls,
        id: UUID,
        product: UUID,
        work: str,
        cost,
        ingredients: Mapping[UUID, int] | None = None,
        yield_quantity: int = 1,
    ) -> FrozenRecipe:
        """Build a frozen recipe from loose values, normalizing cost and ingredient order."""
        return cls(
            id=id,
            product=product,
            work=str(work),
            cost=Decimal(str(cost)),
            ingredients=tuple(sorted((ingredients or {}).items(), key=lambda i: str(i[0]))),
            yield_quantity=yield_quantity,
        )

    @property
    def ingredient_ids(self) -> frozenset[UUID]:
        return frozenset(commodity for commodity, _ in self.ingredients)


@dataclass(frozen=True)
class RecipeGraphSnapshot:
    """
    Closed view of one cookbook: its pantry and the recipes producing
    each commodity, grouped by product.

    Commodities outside the pantry are invisible: recipes producing them
    are dropped, and an ingredient outside the pantry simply has no recipes.
    """

    pantry: frozenset[UUID]
    recipes: Mapping[UUID, tuple[FrozenRecipe, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    cookbook: UUID | None = None

    @classmethod
    def build(
        cls,
        pantry: Iterable[UUID],
        recipes: Mapping[UUID, Iterable[FrozenRecipe]] | Iterable[FrozenRecipe],
        cookbook: UUID | None = None,
    ) -> RecipeGraphSnapshot:
        """
        Freeze a pantry and its recipes into a snapshot.

        recipes may be a mapping product → recipes or a flat iterable.
        Recipes are ordered by id so that valuation is deterministic.
        """
        pantry = frozenset(pantry)

        if isinstance(recipes, Mapping):
            flat = [recipe for group in recipes.values() for recipe in group]
        else:
            flat = list(recipes)

        grouped: dict[UUID, list[FrozenRecipe]] = {}
        for recipe in flat:
            if recipe.product not in pantry:
                logger.warning(
                    "Recipe %s produces %s outside the pantry, ignoring.",
                    recipe.id,
                    recipe.product,
                )
                continue
            grouped.setdefault(recipe.product, []).append(recipe)

        frozen = {
            product: tuple(sorted(group, key=lambda r: str(r.id)))
            for product, group in grouped.items()
        }
        return cls(pantry=pantry, recipes=MappingProxyType(frozen), cookbook=cookbook)

    def recipes_for(self, commodity: UUID) -> tuple[FrozenRecipe, ...]:
        if commodity not in self.pantry:
            return ()
        return self.recipes.get(commodity, ())


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════


@runtime_checkable
class SnapshotBackend(Protocol):
    """
    Protocol for reading the recipe graph of a cookbook.

    Implementations provide the two listings; snapshot() combines them.
    """

    def list_pantry_commodities(self, cookbook_id: UUID) -> set[UUID]:
        """
        Return the ids of every commodity in the cookbook's pantry.

        Raises:
            SnapshotError: If the cookbook cannot be read
        """
        ...

    def list_recipes_producing(self, cookbook_id: UUID) -> dict[UUID, set[FrozenRecipe]]:
        """
        Return every recipe scoped to the cookbook, grouped by product.

        Raises:
            SnapshotError: If the recipes cannot be read
        """
        ...

    def snapshot(self, cookbook_id: UUID) -> RecipeGraphSnapshot:
        return RecipeGraphSnapshot.build(
            self.list_pantry_commodities(cookbook_id),
            self.list_recipes_producing(cookbook_id),
            cookbook=cookbook_id,
        )
