"""
EcoEngine Admin - Django admin for Commodity, Cookbook and Recipe.

Cookbook and Recipe carry django-simple-history records, so their admins
expose the change history.
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from ecoengine.models import Commodity, Cookbook, Ingredient, Recipe


@admin.register(Commodity)
class CommodityAdmin(admin.ModelAdmin):
    """Admin for commodities."""

    list_display = ("label", "abstraction", "uuid", "updated_at")
    search_fields = ("label", "uuid")
    raw_id_fields = ("abstraction",)
    readonly_fields = ("uuid", "created_at", "updated_at")


@admin.register(Cookbook)
class CookbookAdmin(SimpleHistoryAdmin):
    """Admin for cookbooks."""

    list_display = ("uuid", "description", "parent", "created_at")
    search_fields = ("uuid", "description")
    raw_id_fields = ("parent",)
    filter_horizontal = ("pantry",)
    readonly_fields = ("uuid", "created_at", "updated_at")


class IngredientInline(admin.TabularInline):
    """Inline for recipe ingredients."""

    model = Ingredient
    extra = 1
    fields = ("commodity", "quantity")
    raw_id_fields = ("commodity",)


@admin.register(Recipe)
class RecipeAdmin(SimpleHistoryAdmin):
    """Admin for recipes."""

    list_display = ("product", "cookbook", "work", "yield_quantity", "cost")
    list_filter = ("work",)
    search_fields = ("product__label", "cookbook__uuid")
    raw_id_fields = ("cookbook", "product")
    inlines = [IngredientInline]
    readonly_fields = ("uuid", "created_at", "updated_at")
