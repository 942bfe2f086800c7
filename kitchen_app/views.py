# views.py
from rest_framework import viewsets, status
from rest_framework.views import APIView
from rest_framework.filters import SearchFilter, OrderingFilter
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from django_filters import rest_framework as filters
from .models import Recipe, Ingredient
from .serializers import (RecipeSerializer, RecipeListSerializer, IngredientSerializer, ScalingInputSerializer,
                          ScalingPreviewSerializer)
from .utils import build_recipe_snapshot, compose_scaled_view
from .utils_pure import reset_scaling_input
import logging
logger = logging.getLogger(__name__)

# Alias pour ?q= en plus de ?search=
class QSearchFilter(SearchFilter):
    search_param = "q"

class RecipeFilter(filters.FilterSet):
    """
    FilterSet du modèle Recipe :
    - category : égalité insensible à la casse
    - title : contient (insensible à la casse)
    - has_servings : présence d'un nombre de couverts de base
    """
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")
    title = filters.CharFilter(field_name="title", lookup_expr="icontains")
    has_servings = filters.BooleanFilter(method="filter_has_servings")

    class Meta:
        model = Recipe
        fields = ["category", "title"]

    def filter_has_servings(self, qs, name, value: bool):
        """Filtre selon la présence d'un nombre de couverts (0 compte comme absent)."""
        if value:
            return qs.filter(servings__gt=0)
        return qs.filter(Q(servings__isnull=True) | Q(servings=0))

class RecipeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Lecture des recettes + scaling à la volée.

    GET  /api/recipes/{id}/scale/ : état "reset" (couverts de base, ratio 1)
    POST /api/recipes/{id}/scale/ : body = saisie de scaling (voir ScalingInputSerializer)

    Rien n'est persisté : la saisie est reconstruite à chaque requête et jetée ensuite.
    """
    queryset = Recipe.objects.all().order_by("title", "id")
    serializer_class = RecipeSerializer
    permission_classes = [AllowAny]

    filterset_class = RecipeFilter
    filter_backends = [QSearchFilter, DjangoFilterBackend, OrderingFilter]
    search_fields = ["title", "category", "ingredients__designation"]
    ordering_fields = ["title", "category", "servings", "created_at", "updated_at"]
    ordering = ["title", "id"]

    def get_queryset(self):
        qs = super().get_queryset()
        if getattr(self, "action", None) == "list":
            return qs.distinct()
        return qs.prefetch_related("ingredients", "sections")

    def get_serializer_class(self):
        return RecipeListSerializer if self.action == "list" else RecipeSerializer

    @action(detail=True, methods=["get", "post"], url_path="scale")
    def scale(self, request, pk=None):
        """
        Calcule les lignes d'ingrédients à afficher pour la saisie courante.
        Retourne le payload de compose_scaled_view (ratio, "×N", lignes, sections).
        """
        recipe = self.get_object()
        snapshot = build_recipe_snapshot(recipe)

        if request.method == "GET":
            scaling_input = reset_scaling_input(snapshot)
        else:
            serializer = ScalingInputSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            scaling_input = serializer.to_scaling_input()

        data = compose_scaled_view(snapshot, scaling_input)
        # Log audit
        logger.info("scaling recipe_id=%s mode=%s ratio=%.6f", recipe.id, data["mode"], data["ratio"])
        return Response(data, status=status.HTTP_200_OK)

class IngredientViewSet(viewsets.ReadOnlyModelViewSet):
    """ Ingrédients d'une recette (/api/recipes/<recipe_pk>/ingredients/), dans l'ordre d'affichage. """
    serializer_class = IngredientSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        recipe = get_object_or_404(Recipe, pk=self.kwargs.get("recipe_pk"))
        return Ingredient.objects.filter(recipe=recipe).order_by("order_index", "id")

class ScalingPreviewAPIView(APIView):
    """
    API de scaling d'une recette fournie dans la requête (aucun accès base de données).

    ## Contrat:
      - POST /api/scaling/preview/
      - Body JSON:
          recipe  (obj, requis) : {id, servings, ingredients: [{id, quantity, unit, designation}], sections: [...]}
          scaling (obj, optionnel) : saisie de scaling ; absent => couverts de base
    ## Sortie:
      - même format que POST /api/recipes/{id}/scale/
    """
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = ScalingPreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        snapshot = serializer.to_snapshot()
        data = compose_scaled_view(snapshot, serializer.to_scaling_input(snapshot))
        logger.info("scaling preview recipe_id=%s mode=%s ratio=%.6f", snapshot.id, data["mode"], data["ratio"])
        return Response(data, status=status.HTTP_200_OK)
