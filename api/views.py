"""
EcoEngine API ViewSets.
"""

import logging
import math
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal
from uuid import UUID

from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ecoengine.conf import get_setting
from ecoengine.exceptions import EcoError
from ecoengine.models import Commodity, Cookbook, Recipe
from ecoengine.service import Eco
from .serializers import CommoditySerializer, CookbookSerializer, RecipeSerializer

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    "COOKBOOK_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "COMMODITY_NOT_IN_PANTRY": status.HTTP_404_NOT_FOUND,
    "COMMODITY_IN_USE": status.HTTP_409_CONFLICT,
}


def _error_response(error: EcoError) -> Response:
    code = _STATUS_BY_CODE.get(error.code, error.http_status)
    if code >= 500:
        logger.error(f"EcoEngine failure: {error}")
    return Response({"error": error.as_dict()}, status=code)


def _not_found(message: str) -> Response:
    return Response({"error": {"code": "NOT_FOUND", "detail": message}}, status=status.HTTP_404_NOT_FOUND)


def _render_value(value: Decimal, places: Decimal):
    """
    Round to VALUE_DECIMAL_PLACES and render as a float.

    Values beyond float range are rendered as decimal strings, since strict
    JSON has no infinity.
    """
    rounded = value.quantize(places, context=Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN))
    as_float = float(rounded)
    if math.isinf(as_float):
        return str(rounded)
    return as_float


def _present(entry: dict) -> dict:
    """Render Decimal values of an analysis/diff entry as rounded floats."""
    places = Decimal(1).scaleb(-get_setting("VALUE_DECIMAL_PLACES"))
    rendered = {}
    for key, value in entry.items():
        if isinstance(value, Decimal):
            value = _render_value(value, places)
        elif isinstance(value, dict):
            value = _present(value)
        rendered[key] = value
    return rendered


def _parse_uuid(value) -> UUID | None:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class CommodityViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Commodity.

    list: List all commodities
    create: Create a commodity
    retrieve: Get a commodity by UUID
    update: Rename a commodity / change its abstraction
    destroy: Delete a commodity (cascades to recipes and ingredients)
    """

    permission_classes = [IsAuthenticated]
    queryset = Commodity.objects.select_related("abstraction")
    serializer_class = CommoditySerializer
    lookup_field = "uuid"


class CookbookViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Cookbook.

    list: List all cookbooks
    create: Create a cookbook, forking "parent" when given
    retrieve: Get a cookbook by UUID
    update: Change the description
    destroy: Delete a cookbook and its recipes
    pantry: Add (PUT) or remove (DELETE) a commodity
    analysis: Value the pantry, or diff it against a "minuend" cookbook
    """

    permission_classes = [IsAuthenticated]
    queryset = Cookbook.objects.select_related("parent").prefetch_related("pantry", "children")
    serializer_class = CookbookSerializer
    lookup_field = "uuid"

    def create(self, request, *args, **kwargs):
        """
        Create a cookbook.

        POST /api/ecoengine/cookbooks/
        {
            "description": "Modded economy",
            "parent": "<uuid>"  // optional, forks pantry and recipes
        }
        """
        parent = None
        if request.data.get("parent"):
            parent_id = _parse_uuid(request.data["parent"])
            parent = Cookbook.objects.filter(uuid=parent_id).first() if parent_id else None
            if parent is None:
                return _not_found("Parent not found.")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(parent=parent)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put", "delete"], url_path=r"pantry/(?P<commodity>[^/.]+)")
    def pantry(self, request, uuid=None, commodity=None):
        """
        Add or remove a pantry commodity.

        PUT    /api/ecoengine/cookbooks/{uuid}/pantry/{commodity}/
        DELETE /api/ecoengine/cookbooks/{uuid}/pantry/{commodity}/
        """
        cookbook = self.get_object()
        commodity_id = _parse_uuid(commodity)
        target = Commodity.objects.filter(uuid=commodity_id).first() if commodity_id else None

        if request.method == "PUT":
            if target is None:
                return _not_found("Commodity not found.")
            added = Eco.stock(cookbook, target)
            return Response(
                {
                    "cookbook": str(cookbook.uuid),
                    "commodity": str(target.uuid),
                    "info": "Added commodity to pantry." if added else "Commodity was already in pantry.",
                },
                status=status.HTTP_201_CREATED if added else status.HTTP_202_ACCEPTED,
            )

        if target is None:
            return _not_found("Commodity not in pantry.")
        try:
            Eco.unstock(cookbook, target)
        except EcoError as e:
            return _error_response(e)
        return Response(
            {
                "cookbook": str(cookbook.uuid),
                "commodity": str(target.uuid),
                "info": "Commodity removed from pantry.",
            }
        )

    @action(detail=True, methods=["post"])
    def analysis(self, request, uuid=None):
        """
        Value the cookbook, or compare it against another one.

        POST /api/ecoengine/cookbooks/{uuid}/analysis/
        {}                      // analysis only
        {"minuend": "<uuid>"}   // diff: delta = minuend − this cookbook
        """
        cookbook = self.get_object()

        minuend = None
        if "minuend" in request.data:
            minuend_id = _parse_uuid(request.data.get("minuend"))
            minuend = Cookbook.objects.filter(uuid=minuend_id).first() if minuend_id else None
            if minuend is None:
                return _not_found("Comparison cookbook not found.")

        try:
            if minuend is None:
                return Response(self._analysis_body(cookbook))
            return Response(self._diff_body(cookbook, minuend))
        except EcoError as e:
            return _error_response(e)
        except DatabaseError as e:
            logger.error(f"Database malfunction analysing cookbook {cookbook.uuid}: {e}")
            return Response(
                {"error": {"code": "SNAPSHOT_UNAVAILABLE", "detail": "Database malfunction."}},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

    def _analysis_body(self, cookbook: Cookbook) -> dict:
        analysis = Eco.analyze(cookbook)
        return {
            "info": "Computed analysis.",
            "cookbook": str(cookbook.uuid),
            "commodities": [
                _present({"id": str(commodity), **analysis.as_entry(commodity)})
                for commodity in sorted(analysis.commodity_ids(), key=str)
            ],
        }

    def _diff_body(self, subtrahend: Cookbook, minuend: Cookbook) -> dict:
        diff = Eco.diff(subtrahend, minuend)
        return {
            "info": "Computed diff.",
            "subtrahend": str(subtrahend.uuid),
            "minuend": str(minuend.uuid),
            "commodities": [
                _present({"id": str(commodity), **diff.as_entry(commodity)})
                for commodity in sorted(diff.commodity_union(), key=str)
            ],
        }


class RecipeViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the recipes of one cookbook.

    Mounted under /cookbooks/{cookbook_uuid}/recipes/; an unknown cookbook
    is a 404 for every action.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = RecipeSerializer
    lookup_field = "uuid"

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.cookbook = get_object_or_404(Cookbook, uuid=kwargs["cookbook_uuid"])

    def get_queryset(self):
        return (
            Recipe.objects.filter(cookbook__uuid=self.kwargs["cookbook_uuid"])
            .select_related("product", "cookbook")
            .prefetch_related("ingredients__commodity")
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["cookbook"] = getattr(self, "cookbook", None)
        return context

    def create(self, request, *args, **kwargs):
        try:
            return super().create(request, *args, **kwargs)
        except EcoError as e:
            return _error_response(e)

    def update(self, request, *args, **kwargs):
        try:
            return super().update(request, *args, **kwargs)
        except EcoError as e:
            return _error_response(e)
