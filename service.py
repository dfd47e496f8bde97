"""
EcoEngine Service - Thin wrapper over models and engines.

Reads cookbooks through the configured snapshot backend and hands the
frozen snapshots to the pure engines in ecoengine.services.

Usage:
    from ecoengine import eco, EcoError

    # Valuation
    analysis = eco.analyze(vanilla)
    analysis.value_of(iron_ingot.uuid)

    # Comparison (delta = minuend value − subtrahend value)
    diff = eco.diff(vanilla, modded)

    # Cookbook management
    modded = eco.fork(vanilla, description="Modded economy")
    eco.stock(modded, netherite)
    eco.unstock(modded, netherite)
"""

import logging
from typing import Mapping

from django.db import transaction
from django.db.models import Q

from ecoengine.conf import get_setting, get_snapshot_backend
from ecoengine.exceptions import EcoError
from ecoengine.models import Commodity, Cookbook, Ingredient, Recipe
from ecoengine.results import Analysis, Diff
from ecoengine.services import DiffEngine, ValuationEngine

logger = logging.getLogger(__name__)


def _cookbook_id(cookbook):
    return getattr(cookbook, "uuid", cookbook)


class Eco:
    """
    Main API for EcoEngine (thin wrapper).

    Accepts Cookbook instances or their uuids wherever a cookbook is read
    only; mutating operations need model instances.
    """

    # ══════════════════════════════════════════════════════════════
    # VALUATION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def analyze(cls, cookbook) -> Analysis:
        """
        Value every commodity in the cookbook's pantry.

        Raises:
            EcoError: COOKBOOK_NOT_FOUND
            SnapshotError: If the recipe graph cannot be read
        """
        snapshot = get_snapshot_backend().snapshot(_cookbook_id(cookbook))
        return ValuationEngine(
            snapshot,
            memoize=get_setting("MEMOIZE"),
            precision=get_setting("VALUE_PRECISION"),
        ).analyze()

    @classmethod
    def diff(cls, subtrahend, minuend) -> Diff:
        """
        Compare two cookbooks.

        The subtrahend's analysis is the first analysis, the minuend's the
        second: modified deltas are minuend value − subtrahend value,
        DISAPPEARING commodities are only in the subtrahend, NEW ones only
        in the minuend.
        """
        backend = get_snapshot_backend()
        memoize = get_setting("MEMOIZE")
        precision = get_setting("VALUE_PRECISION")

        first = backend.snapshot(_cookbook_id(subtrahend))
        second = backend.snapshot(_cookbook_id(minuend))

        result = DiffEngine.diff(
            first.pantry,
            ValuationEngine(first, memoize=memoize, precision=precision).analyze(),
            second.pantry,
            ValuationEngine(second, memoize=memoize, precision=precision).analyze(),
            precision=precision,
        )

        logger.info(
            f"Diffed cookbook {first.cookbook} against {second.cookbook}",
            extra={
                "subtrahend": str(first.cookbook),
                "minuend": str(second.cookbook),
            },
        )
        return result

    # ══════════════════════════════════════════════════════════════
    # COOKBOOKS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    @transaction.atomic
    def fork(cls, parent: Cookbook, description: str | None = None) -> Cookbook:
        """
        Create a child cookbook with a copy of the parent's pantry and recipes.

        The child inherits the parent's description unless one is given.
        """
        child = Cookbook.objects.create(
            parent=parent,
            description=(description or "").strip() or parent.description,
        )
        child.pantry.set(parent.pantry.all())

        recipes = parent.recipes.select_related("product").prefetch_related(
            "ingredients__commodity"
        )
        for recipe in recipes:
            clone = Recipe.objects.create(
                cookbook=child,
                product=recipe.product,
                yield_quantity=recipe.yield_quantity,
                work=recipe.work,
                cost=recipe.cost,
            )
            for ingredient in recipe.ingredients.all():
                Ingredient.objects.create(
                    recipe=clone,
                    commodity=ingredient.commodity,
                    quantity=ingredient.quantity,
                )

        logger.info(
            f"Forked cookbook {parent.uuid} into {child.uuid}",
            extra={"parent": str(parent.uuid), "child": str(child.uuid)},
        )
        return child

    @classmethod
    def stock(cls, cookbook: Cookbook, commodity: Commodity) -> bool:
        """
        Add a commodity to the pantry.

        Returns:
            True if it was added, False if it was already there
        """
        if cookbook.has_in_pantry(commodity):
            return False

        cookbook.pantry.add(commodity)
        logger.info(f"Added {commodity.uuid} to pantry of cookbook {cookbook.uuid}")
        return True

    @classmethod
    def unstock(cls, cookbook: Cookbook, commodity: Commodity) -> None:
        """
        Remove a commodity from the pantry.

        Raises:
            EcoError: COMMODITY_NOT_IN_PANTRY, or COMMODITY_IN_USE when a
                      recipe of the cookbook produces or consumes it
        """
        if not cookbook.has_in_pantry(commodity):
            raise EcoError(
                "COMMODITY_NOT_IN_PANTRY",
                cookbook=str(cookbook.uuid),
                commodity=str(commodity.uuid),
            )

        in_use = (
            Recipe.objects.filter(cookbook=cookbook)
            .filter(Q(product=commodity) | Q(ingredients__commodity=commodity))
            .exists()
        )
        if in_use:
            raise EcoError(
                "COMMODITY_IN_USE",
                cookbook=str(cookbook.uuid),
                commodity=str(commodity.uuid),
            )

        cookbook.pantry.remove(commodity)
        logger.info(f"Removed {commodity.uuid} from pantry of cookbook {cookbook.uuid}")

    # ══════════════════════════════════════════════════════════════
    # RECIPES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    @transaction.atomic
    def create_recipe(
        cls,
        cookbook: Cookbook,
        product: Commodity,
        work: str,
        cost,
        yield_quantity: int = 1,
        ingredients: Mapping[Commodity, int] | None = None,
    ) -> Recipe:
        """
        Create a recipe and its ingredients in one transaction.

        Raises:
            EcoError: UNSUPPORTED_PRODUCT, UNSUPPORTED_INGREDIENT, INVALID_QUANTITY
        """
        if not cookbook.has_in_pantry(product):
            raise EcoError(
                "UNSUPPORTED_PRODUCT",
                cookbook=str(cookbook.uuid),
                product=str(product.uuid),
            )

        recipe = Recipe.objects.create(
            cookbook=cookbook,
            product=product,
            work=work,
            cost=cost,
            yield_quantity=yield_quantity,
        )
        if ingredients:
            cls.set_ingredients(recipe, ingredients)
        return recipe

    @classmethod
    @transaction.atomic
    def set_ingredients(cls, recipe: Recipe, ingredients: Mapping[Commodity, int]) -> Recipe:
        """
        Replace every ingredient of a recipe.

        Raises:
            EcoError: UNSUPPORTED_INGREDIENT, INVALID_QUANTITY
        """
        pantry = set(recipe.cookbook.pantry.values_list("pk", flat=True))

        for commodity, quantity in ingredients.items():
            if commodity.pk not in pantry:
                raise EcoError(
                    "UNSUPPORTED_INGREDIENT",
                    cookbook=str(recipe.cookbook.uuid),
                    commodity=str(commodity.uuid),
                )
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise EcoError(
                    "INVALID_QUANTITY",
                    commodity=str(commodity.uuid),
                    quantity=quantity,
                )

        recipe.ingredients.all().delete()
        for commodity, quantity in ingredients.items():
            Ingredient.objects.create(recipe=recipe, commodity=commodity, quantity=quantity)

        return recipe


eco = Eco
