from rest_framework import serializers
from .models import Recipe, RecipeSection, Ingredient
from .constants import SCALING_MODE_CHOICES
from . import utils_pure as engine


class IngredientSerializer(serializers.ModelSerializer):
    """ Ligne d'ingrédient telle que stockée (quantités de base, non scalées). """
    is_qs = serializers.BooleanField(read_only=True)

    class Meta:
        model = Ingredient
        fields = ['id', 'quantity', 'unit', 'designation', 'order_index', 'is_qs']
        read_only_fields = fields

class RecipeSectionSerializer(serializers.ModelSerializer):
    ingredient_ids = serializers.SerializerMethodField()

    class Meta:
        model = RecipeSection
        fields = ['id', 'title', 'instructions', 'order_index', 'ingredient_ids']
        read_only_fields = fields

    def get_ingredient_ids(self, obj):
        return [link.ingredient_id for link in obj.ingredient_links.order_by("order_index", "id")]

class RecipeSerializer(serializers.ModelSerializer):
    base_servings = serializers.IntegerField(read_only=True)
    ingredients = IngredientSerializer(many=True, read_only=True)
    sections = RecipeSectionSerializer(many=True, read_only=True)

    class Meta:
        model = Recipe
        fields = ['id', 'title', 'category', 'servings', 'base_servings', 'prep_time', 'cook_time', 'notes', 'allergens',
                  'ingredients', 'sections', 'created_at', 'updated_at']
        read_only_fields = fields

class RecipeListSerializer(serializers.ModelSerializer):
    """ Version allégée pour la liste (sans ingrédients ni sections). """
    ingredient_count = serializers.IntegerField(source="ingredients.count", read_only=True)

    class Meta:
        model = Recipe
        fields = ['id', 'title', 'category', 'servings', 'prep_time', 'cook_time', 'ingredient_count']
        read_only_fields = fields

# ============================================================
# Saisie de scaling (ScalingInput)
# ============================================================

def scaling_input_from_data(data):
    """ Valeur objet immuable à passer au moteur, depuis des données déjà validées. """
    if data.get("mode") == "crossMultiply":
        return engine.CrossMultiplyInput(
            reference_ingredient_id=data.get("reference_ingredient_id") or None,
            manual_base=data.get("manual_base") or 0,
            have=data.get("have") or "",
            target_servings=data.get("target_servings"),
        )
    return engine.ServingsInput(target_servings=data.get("target_servings"))

class ScalingInputSerializer(serializers.Serializer):
    """
    Reconstruit la saisie de scaling envoyée par le client.

    - {"mode": "servings", "target_servings": 8}
    - {"mode": "crossMultiply", "reference_ingredient_id": "12", "manual_base": 0, "have": "750", "target_servings": 4}

    `have` est du texte libre : il n'est jamais rejeté ici, le moteur l'ignore s'il n'est pas exploitable.
    """
    mode = serializers.ChoiceField(choices=SCALING_MODE_CHOICES, default="servings")
    target_servings = serializers.IntegerField(required=False, allow_null=True, default=None)
    reference_ingredient_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    manual_base = serializers.FloatField(required=False, allow_null=True, default=0)
    have = serializers.CharField(required=False, allow_null=True, allow_blank=True, default="", trim_whitespace=False)

    def to_scaling_input(self):
        return scaling_input_from_data(self.validated_data)

# ============================================================
# Aperçu sans base de données (recette fournie dans la requête)
# ============================================================

class PreviewIngredientSerializer(serializers.Serializer):
    id = serializers.CharField()
    quantity = serializers.FloatField(required=False, allow_null=True, default=None)
    unit = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    designation = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)

class PreviewSectionSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    instructions = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    ingredient_ids = serializers.ListField(child=serializers.CharField(), required=False, default=list)

class PreviewRecipeSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, default="preview")
    servings = serializers.IntegerField(required=False, allow_null=True, default=None)
    ingredients = PreviewIngredientSerializer(many=True)
    sections = PreviewSectionSerializer(many=True, required=False, default=list)

class ScalingPreviewSerializer(serializers.Serializer):
    recipe = PreviewRecipeSerializer()
    scaling = ScalingInputSerializer(required=False)

    def validate_recipe(self, value):
        ids = [str(ing["id"]) for ing in value["ingredients"]]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Les ids d'ingrédients doivent être uniques.")
        return value

    def to_snapshot(self) -> engine.Recipe:
        data = self.validated_data["recipe"]
        return engine.Recipe(
            id=data["id"],
            base_servings=data.get("servings"),
            ingredients=tuple(
                engine.Ingredient(id=ing["id"], quantity=ing.get("quantity"), unit=ing.get("unit"), designation=ing.get("designation"))
                for ing in data["ingredients"]
            ),
            sections=tuple(
                engine.Section(id=sec["id"], title=sec.get("title"), instructions=sec.get("instructions"),
                               ingredient_ids=tuple(sec.get("ingredient_ids") or ()))
                for sec in data.get("sections") or []
            ),
        )

    def to_scaling_input(self, snapshot: engine.Recipe):
        """ Sans bloc "scaling", on part de l'état "reset" (couverts de base). """
        scaling = self.validated_data.get("scaling")
        if not scaling:
            return engine.reset_scaling_input(snapshot)
        return scaling_input_from_data(scaling)
