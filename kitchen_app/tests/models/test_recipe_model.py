import pytest
from django.core.exceptions import ValidationError
from kitchen_app.models import Recipe, Ingredient, RecipeSection
from kitchen_app.tests.utils import validate_constraint, validate_field_normalization, update_and_verify_model, make_recipe

pytestmark = pytest.mark.django_db

@pytest.fixture
def recipe():
    return make_recipe(title="Pâte sablée", servings=6, lines=[("Farine", 250, "g"), ("Beurre", 125, "g")],
                       sections=[("Sablage", [0, 1])])

def test_recipe_creation_db(recipe):
    assert recipe.id is not None
    assert str(recipe) == "Pâte sablée"
    assert recipe.ingredients.count() == 2
    assert recipe.sections.count() == 1

def test_recipe_update_db(recipe):
    update_and_verify_model(recipe, "notes", "Repos 1 h au frais.")

def test_title_whitespace_is_collapsed_db():
    validate_field_normalization(Recipe, "title", "  Tarte   au  citron ", "Tarte au citron", servings=4)

def test_category_whitespace_is_collapsed_db():
    validate_field_normalization(Recipe, "category", "  Entremets   glacés ", "Entremets glacés", title="Vacherin")

def test_title_min_length():
    validate_constraint(Recipe, "title", "  ab  ", "au moins 3 caractères", servings=4)

def test_title_is_required():
    with pytest.raises(ValidationError):
        Recipe.objects.create(title="", servings=4)

def test_negative_servings_rejected():
    validate_constraint(Recipe, "servings", -2, "servings", title="Tarte Tatin")

@pytest.mark.parametrize("servings, expected", [(None, 1), (0, 1), (1, 1), (6, 6)])
def test_base_servings_never_below_one(servings, expected):
    assert Recipe(title="Crumble", servings=servings).base_servings == expected

def test_delete_recipe_cascades(recipe):
    recipe_id = recipe.id
    recipe.delete()
    assert not Ingredient.objects.filter(recipe_id=recipe_id).exists()
    assert not RecipeSection.objects.filter(recipe_id=recipe_id).exists()
