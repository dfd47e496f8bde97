"""
Recipe and Ingredient models.

Recipe = HOW a commodity is obtained within a cookbook: a work method,
a cost and a set of ingredients with quantities.
Ingredient = one commodity consumed by a recipe.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from ecoengine.protocols.snapshot import FrozenRecipe


class Work(models.TextChoices):
    """
    Work method of a recipe.

    PURCHASE adds its cost to the ingredient cost; every other method
    multiplies the ingredient cost by its cost.
    """

    PURCHASE = "PURCHASE", _("Purchase")
    OBTAIN = "OBTAIN", _("Obtain")
    CRAFT = "CRAFT", _("Craft")
    SMELT = "SMELT", _("Smelt")
    WAIT = "WAIT", _("Wait")
    SELL = "SELL", _("Sell")


class Recipe(models.Model):
    """
    Production rule for one commodity, scoped to one cookbook.

    Define:
    - Product (Commodity in the cookbook's pantry)
    - Yield per execution
    - Work method and its cost
    - Ingredients (Ingredient rows)
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )
    cookbook = models.ForeignKey(
        "ecoengine.Cookbook",
        on_delete=models.CASCADE,
        related_name="recipes",
        verbose_name=_("Cookbook"),
    )
    product = models.ForeignKey(
        "ecoengine.Commodity",
        on_delete=models.CASCADE,
        related_name="recipes",
        verbose_name=_("Product"),
    )
    yield_quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Yield"),
        help_text=_("Quantity produced per execution of the recipe"),
    )
    work = models.CharField(
        max_length=20,
        choices=Work.choices,
        default=Work.CRAFT,
        verbose_name=_("Work"),
    )
    cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Cost"),
        help_text=_("Flat cost for PURCHASE, multiplier for every other work"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "ecoengine_recipe"
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        ordering = ["cookbook", "product__label", "created_at"]
        indexes = [
            models.Index(fields=["cookbook", "product"], name="ecoengine_recipe_product_idx"),
        ]

    def clean(self):
        super().clean()
        if self.yield_quantity is not None and self.yield_quantity <= 0:
            raise ValidationError({"yield_quantity": _("Must be greater than zero.")})
        if self.cost is not None and self.cost < 0:
            raise ValidationError({"cost": _("Must not be negative.")})
        if self.cookbook_id and self.product_id:
            if not self.cookbook.pantry.filter(pk=self.product_id).exists():
                raise ValidationError({"product": _("Product is not in the cookbook's pantry.")})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product} ({self.yield_quantity}x, {self.work})"

    def ingredient_map(self) -> dict:
        """
        Ingredient commodity uuid → required quantity.

        Uses the prefetch cache when "ingredients__commodity" was prefetched.
        """
        return {
            ingredient.commodity.uuid: ingredient.quantity
            for ingredient in self.ingredients.all()
        }

    def freeze(self) -> FrozenRecipe:
        """Immutable view of this recipe for the valuation engine."""
        return FrozenRecipe.of(
            id=self.uuid,
            product=self.product.uuid,
            work=self.work,
            cost=self.cost,
            ingredients=self.ingredient_map(),
            yield_quantity=self.yield_quantity,
        )


class Ingredient(models.Model):
    """
    Commodity consumed by a recipe, with the quantity required per execution.
    """

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="ingredients",
        verbose_name=_("Recipe"),
    )
    commodity = models.ForeignKey(
        "ecoengine.Commodity",
        on_delete=models.CASCADE,
        related_name="usages",
        verbose_name=_("Commodity"),
    )
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_("Quantity"),
    )

    class Meta:
        db_table = "ecoengine_ingredient"
        verbose_name = _("Ingredient")
        verbose_name_plural = _("Ingredients")
        ordering = ["recipe", "id"]
        unique_together = [["recipe", "commodity"]]

    def clean(self):
        super().clean()
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({"quantity": _("Must be greater than zero.")})
        if self.recipe_id and self.commodity_id:
            if not self.recipe.cookbook.pantry.filter(pk=self.commodity_id).exists():
                raise ValidationError(
                    {"commodity": _("Ingredient is not in the cookbook's pantry.")}
                )

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.commodity} ({self.quantity})"
