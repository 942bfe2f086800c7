"""
URL configuration for brigade project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""
from django.urls import path, include
from django.contrib import admin
from rest_framework_nested.routers import DefaultRouter, NestedDefaultRouter
from kitchen_app.views import RecipeViewSet, IngredientViewSet, ScalingPreviewAPIView

router = DefaultRouter()
router.register(r'recipes', RecipeViewSet)

# Router imbriqué
ingredients_router = NestedDefaultRouter(router, r"recipes", lookup="recipe")
ingredients_router.register(r"ingredients", IngredientViewSet, basename="recipe-ingredients")

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api/', include(ingredients_router.urls)),
    path("api/scaling/preview/", ScalingPreviewAPIView.as_view(), name="scaling-preview"),
]
