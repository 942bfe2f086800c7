import pytest
from django.core.exceptions import ValidationError
from kitchen_app.models import Recipe, RecipeSection, Ingredient, SectionIngredient

def validate_constraint(model, field_name, value, expected_error, **valid_data):
    """ Applique une validation sur un champ en testant si une erreur spécifique est levée. """
    valid_data[field_name] = value
    with pytest.raises(ValidationError, match=expected_error):
        obj = model(**valid_data)
        obj.full_clean() # Déclenche clean() pour vérifier la contrainte

def validate_model_str(model, expected_str, **valid_data):
    """ Vérifie que la méthode `__str__()` du modèle retourne la bonne valeur. """
    obj = model(**valid_data)
    obj.full_clean()
    assert str(obj) == expected_str, f"__str__() attendu : {expected_str}, obtenu : {str(obj)}"

def update_and_verify_model(obj, field_name, new_value):
    """ Met à jour un champ et vérifie que la modification est bien enregistrée. """
    setattr(obj, field_name, new_value)
    obj.save()
    obj.refresh_from_db()
    assert getattr(obj, field_name) == new_value, f"Échec de la mise à jour du champ '{field_name}'"

def validate_field_normalization(model, field_name, input_value, expected_value, **valid_data):
    """ Vérifie qu’un champ est bien normalisé lors de la création. """
    valid_data[field_name] = input_value  # Injecter la valeur brute
    instance = model.objects.create(**valid_data)
    instance.refresh_from_db()
    assert getattr(instance, field_name) == expected_value

# --- Mini factories ---

def make_recipe(title="Pâte sablée", servings=4, lines=(), sections=()):
    """
    Crée une recette et ses lignes.
    - lines : [(designation, quantity, unit), ...]
    - sections : [(titre, [index des lignes]), ...]
    """
    recipe = Recipe.objects.create(title=title, servings=servings)
    ingredients = [Ingredient.objects.create(recipe=recipe, designation=d, quantity=q, unit=u) for d, q, u in lines]
    for section_title, indexes in sections:
        section = RecipeSection.objects.create(recipe=recipe, title=section_title, instructions=f"Étape {section_title}")
        for i in indexes:
            SectionIngredient.objects.create(section=section, ingredient=ingredients[i])
    return recipe
