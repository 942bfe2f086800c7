from . import utils_pure as engine

"""
=================================================
 BACKEND MÉTIER – SCALING D'UNE RECETTE STOCKÉE
=================================================

Pont entre l'ORM et le moteur pur (`utils_pure`) :
    build_recipe_snapshot(recipe)                 # Recipe Django -> instantané immuable
    compose_scaled_view(snapshot, scaling_input)  # instantané + saisie -> payload front-ready

Aucun calcul de quantité ici : tout passe par engine.resolve_with_mode / engine.scale.
"""

# ============================================================
# 1. ORM -> INSTANTANÉ
# ============================================================

def build_recipe_snapshot(recipe) -> engine.Recipe:
    """
    Construit l'instantané immuable d'une recette depuis l'ORM.
    Utilise:
      - Recipe.ingredients (quantity, unit, designation), triés par order_index
      - Recipe.sections → SectionIngredient (liens triés par order_index)
    Les ids sont convertis en chaînes (le moteur ne connaît que des ids opaques).
    """
    ingredients = tuple(
        engine.Ingredient(id=str(ing.id), quantity=ing.quantity, unit=ing.unit, designation=ing.designation)
        for ing in recipe.ingredients.order_by("order_index", "id")
    )
    sections = tuple(
        engine.Section(
            id=str(section.id),
            title=section.title,
            instructions=section.instructions,
            ingredient_ids=tuple(str(link.ingredient_id) for link in section.ingredient_links.order_by("order_index", "id")),
        )
        for section in recipe.sections.order_by("order_index", "id")
    )
    return engine.Recipe(id=str(recipe.id), base_servings=recipe.servings, ingredients=ingredients, sections=sections)

# ============================================================
# 2. PAYLOAD FRONT-READY
# ============================================================

def serialize_row(row: engine.ScaledRow) -> dict:
    return {"ingredient_id": row.ingredient_id, "label": row.label, "display_quantity": row.display_quantity}

def current_target_servings(snapshot: engine.Recipe, scaling_input) -> int:
    """ Nombre de couverts affiché : la cible saisie si elle existe, sinon la base. """
    target = getattr(scaling_input, "target_servings", None)
    if engine.parse_number(target) is None:
        target = snapshot.base_servings
    return int(round(engine.clamp_servings(target)))

def compose_scaled_view(snapshot: engine.Recipe, scaling_input) -> dict:
    """
    Compose le payload consommé par l'affichage.
    Retour:
      {
        "recipe_id": str, "base_servings": int, "target_servings": int,
        "mode": str, "ratio": float, "ratio_label": "×N",
        "ingredients": [{"ingredient_id", "label", "display_quantity"}],
        "sections": [{"id", "title", "instructions", "ingredients": [...]}]
      }
    Les lignes masquées restent présentes avec display_quantity == "" : c'est au client de ne pas les afficher.
    """
    ratio, mode = engine.resolve_with_mode(snapshot, scaling_input)
    rows = engine.scale(snapshot, ratio)
    sections = [
        {"id": group["id"], "title": group["title"], "instructions": group["instructions"],
         "ingredients": [serialize_row(row) for row in group["rows"]]}
        for group in engine.scale_sections(snapshot, ratio)
    ]
    return {
        "recipe_id": snapshot.id,
        "base_servings": int(round(engine.clamp_servings(snapshot.base_servings))),
        "target_servings": current_target_servings(snapshot, scaling_input),
        "mode": mode,
        "ratio": ratio,
        "ratio_label": engine.format_ratio(ratio),
        "ingredients": [serialize_row(row) for row in rows],
        "sections": sections,
    }
