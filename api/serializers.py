"""
EcoEngine API Serializers.
"""

from rest_framework import serializers

from ecoengine.models import Commodity, Cookbook, Recipe, Work


class CommoditySerializer(serializers.ModelSerializer):
    """Serializer for Commodity model."""

    id = serializers.UUIDField(source="uuid", read_only=True)
    abstraction = serializers.SlugRelatedField(
        slug_field="uuid",
        queryset=Commodity.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Commodity
        fields = ["id", "label", "abstraction", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_label(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Invalid label.")
        return value

    def validate(self, attrs):
        abstraction = attrs.get("abstraction")
        if self.instance is not None and abstraction is not None:
            if abstraction.pk == self.instance.pk:
                raise serializers.ValidationError(
                    {"abstraction": "A commodity cannot abstract itself."}
                )
        return attrs


class CookbookSerializer(serializers.ModelSerializer):
    """
    Serializer for Cookbook model.

    The parent is resolved by the view (unknown parent is a 404, not a
    validation error) and passed to save().
    """

    id = serializers.UUIDField(source="uuid", read_only=True)
    parent = serializers.SlugRelatedField(slug_field="uuid", read_only=True)
    pantry = serializers.SlugRelatedField(slug_field="uuid", many=True, read_only=True)
    children = serializers.SlugRelatedField(slug_field="uuid", many=True, read_only=True)

    class Meta:
        model = Cookbook
        fields = ["id", "description", "parent", "children", "pantry", "created_at", "updated_at"]
        read_only_fields = ["id", "parent", "children", "pantry", "created_at", "updated_at"]

    def validate_description(self, value: str) -> str:
        return value.strip()

    def validate(self, attrs):
        if self.instance is None:
            has_parent = bool(self.initial_data.get("parent"))
            description = attrs.get("description")
        else:
            has_parent = self.instance.parent_id is not None
            description = attrs.get("description", self.instance.description)

        if not has_parent and not description:
            raise serializers.ValidationError(
                "A cookbook needs a parent and/or a description."
            )
        return attrs

    def create(self, validated_data):
        from ecoengine.service import Eco

        parent = validated_data.pop("parent", None)
        if parent is not None:
            return Eco.fork(parent, validated_data.get("description"))
        return super().create(validated_data)


class IngredientSerializer(serializers.Serializer):
    """Ingredient as {id: commodity uuid, quantity}."""

    id = serializers.UUIDField(source="commodity.uuid")
    quantity = serializers.IntegerField(min_value=1)


class RecipeSerializer(serializers.ModelSerializer):
    """
    Serializer for Recipe model.

    Expects the cookbook in the serializer context; product and
    ingredients must belong to its pantry.
    """

    id = serializers.UUIDField(source="uuid", read_only=True)
    cookbook = serializers.SlugRelatedField(slug_field="uuid", read_only=True)
    product = serializers.SlugRelatedField(
        slug_field="uuid", queryset=Commodity.objects.all()
    )
    work = serializers.ChoiceField(choices=Work.choices)
    cost = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)
    ingredients = IngredientSerializer(many=True, required=False)

    class Meta:
        model = Recipe
        fields = [
            "id",
            "cookbook",
            "product",
            "yield_quantity",
            "work",
            "cost",
            "ingredients",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "cookbook", "created_at", "updated_at"]

    def get_fields(self):
        # "yield" is a keyword, so it cannot be declared as an attribute.
        fields = super().get_fields()
        fields.pop("yield_quantity")
        fields["yield"] = serializers.IntegerField(
            source="yield_quantity", min_value=1, required=False
        )
        return fields

    @property
    def owner(self) -> Cookbook:
        return self.context["cookbook"]

    def validate_product(self, product: Commodity) -> Commodity:
        if not self.owner.has_in_pantry(product):
            raise serializers.ValidationError("Unsupported product.")
        return product

    def validate_ingredients(self, ingredients: list) -> dict:
        """Resolve [{commodity: {uuid}, quantity}] to {Commodity: quantity}."""
        uuids = [item["commodity"]["uuid"] for item in ingredients]
        if len(set(uuids)) != len(uuids):
            raise serializers.ValidationError("Duplicate ingredient.")

        commodities = {
            commodity.uuid: commodity
            for commodity in self.owner.pantry.filter(uuid__in=uuids)
        }
        resolved = {}
        for item in ingredients:
            commodity = commodities.get(item["commodity"]["uuid"])
            if commodity is None:
                raise serializers.ValidationError(
                    f"Unsupported ingredient {item['commodity']['uuid']}."
                )
            resolved[commodity] = item["quantity"]
        return resolved

    def create(self, validated_data):
        from ecoengine.service import Eco

        return Eco.create_recipe(
            cookbook=self.owner,
            product=validated_data["product"],
            work=validated_data["work"],
            cost=validated_data["cost"],
            yield_quantity=validated_data.get("yield_quantity", 1),
            ingredients=validated_data.get("ingredients"),
        )

    def update(self, instance, validated_data):
        from ecoengine.service import Eco

        ingredients = validated_data.pop("ingredients", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if ingredients is not None:
            Eco.set_ingredients(instance, ingredients)
        return instance
