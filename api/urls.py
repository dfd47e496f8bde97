"""
EcoEngine API URLs.

Include this in your project's urlpatterns:

    path('api/ecoengine/', include('ecoengine.api.urls')),
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import CommodityViewSet, CookbookViewSet, RecipeViewSet

router = DefaultRouter()
router.register("commodities", CommodityViewSet)
router.register("cookbooks", CookbookViewSet)

recipe_list = RecipeViewSet.as_view({"get": "list", "post": "create"})
recipe_detail = RecipeViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)

urlpatterns = [
    path("cookbooks/<uuid:cookbook_uuid>/recipes/", recipe_list, name="cookbook-recipe-list"),
    path(
        "cookbooks/<uuid:cookbook_uuid>/recipes/<uuid:uuid>/",
        recipe_detail,
        name="cookbook-recipe-detail",
    ),
] + router.urls
