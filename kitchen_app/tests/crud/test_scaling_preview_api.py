import pytest
from rest_framework import status
from kitchen_app.models import Recipe
from kitchen_app.tests.base_api_test import api_client, display_by_label

pytestmark = pytest.mark.django_db

url = "/api/scaling/preview/"

@pytest.fixture
def recipe_data():
    return {
        "id": "brouillon",
        "servings": 4,
        "ingredients": [
            {"id": "farine", "quantity": 100, "unit": "g", "designation": "Farine"},
            {"id": "chocolat", "quantity": 500, "unit": "g", "designation": "Chocolat"},
            {"id": "sel", "quantity": None, "unit": "QS", "designation": "Sel"},
        ],
        "sections": [{"id": "s1", "title": "Appareil", "ingredient_ids": ["chocolat", "farine"]}],
    }

def test_preview_without_scaling_is_identity_api(api_client, recipe_data):
    response = api_client.post(url, {"recipe": recipe_data}, format="json")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert (data["recipe_id"], data["mode"], data["ratio"]) == ("brouillon", "servings", 1.0)
    assert display_by_label(data) == {"Farine": "100 g", "Chocolat": "500 g", "Sel": "QS"}

def test_preview_servings_api(api_client, recipe_data):
    response = api_client.post(url, {"recipe": recipe_data, "scaling": {"mode": "servings", "target_servings": 2}}, format="json")
    data = response.json()
    assert data["ratio_label"] == "×0.5"
    assert [row["display_quantity"] for row in data["sections"][0]["ingredients"]] == ["250 g", "50 g"]

def test_preview_cross_multiply_api(api_client, recipe_data):
    scaling = {"mode": "crossMultiply", "reference_ingredient_id": "chocolat", "have": "750"}
    data = api_client.post(url, {"recipe": recipe_data, "scaling": scaling}, format="json").json()
    assert (data["mode"], data["ratio"]) == ("cross_multiply_reference", 1.5)
    assert display_by_label(data)["Farine"] == "150 g"

def test_preview_does_not_touch_database_api(api_client, recipe_data):
    api_client.post(url, {"recipe": recipe_data}, format="json")
    assert Recipe.objects.count() == 0

def test_preview_duplicate_ids_rejected_api(api_client, recipe_data):
    recipe_data["ingredients"].append({"id": "farine", "quantity": 1, "unit": "g"})
    response = api_client.post(url, {"recipe": recipe_data}, format="json")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "recipe" in response.json()

def test_preview_requires_recipe_api(api_client):
    response = api_client.post(url, {"scaling": {"mode": "servings"}}, format="json")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "recipe" in response.json()

def test_preview_fractional_servings_rejected_api(api_client, recipe_data):
    recipe_data["servings"] = 2.5
    response = api_client.post(url, {"recipe": recipe_data}, format="json")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "servings" in response.json()["recipe"]
