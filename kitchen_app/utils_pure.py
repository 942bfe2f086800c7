"""
=================================================
 MOTEUR DE SCALING DES QUANTITÉS (PUR, SANS DJANGO)
=================================================

Deux fonctions font tout le travail :
    resolve(recipe, scaling_input) -> float         # calcule le coefficient
    scale(recipe, ratio) -> list[ScaledRow]          # applique le coefficient

Aucune I/O, aucune mutation des entrées : chaque appel reçoit un instantané
immuable et retourne une nouvelle structure. Les vues (API, admin, commandes)
ne recalculent jamais l'arithmétique elles-mêmes, elles passent par ici.
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional, Union
from .constants import QS_SYNONYMS, QS_LABEL, EMPTY_PLACEHOLDER, QUANTITY_DECIMALS, MIN_SERVINGS
from .text_utils import normalize_unit

# ============================================================
# 0. STRUCTURES DE DONNÉES
# ============================================================

@dataclass(frozen=True)
class Ingredient:
    id: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    designation: Optional[str] = None

@dataclass(frozen=True)
class Section:
    """ Regroupement d'affichage : une section liste des ids d'ingrédients, dans l'ordre. """
    id: str
    title: Optional[str] = None
    instructions: Optional[str] = None
    ingredient_ids: tuple = ()

@dataclass(frozen=True)
class Recipe:
    id: str
    base_servings: Optional[float] = None
    ingredients: tuple = ()
    sections: tuple = ()

@dataclass(frozen=True)
class ServingsInput:
    target_servings: Optional[float] = None
    mode: str = field(default="servings", init=False)

@dataclass(frozen=True)
class CrossMultiplyInput:
    """
    Règle de trois. `have` est le texte brut saisi par l'utilisateur.
    `target_servings` = nombre de couverts actuellement affiché, utilisé seulement en cas de repli.
    """
    reference_ingredient_id: Optional[str] = None
    manual_base: float = 0
    have: str = ""
    target_servings: Optional[float] = None
    mode: str = field(default="crossMultiply", init=False)

ScalingInput = Union[ServingsInput, CrossMultiplyInput]

@dataclass(frozen=True)
class ScaledRow:
    ingredient_id: str
    label: str
    display_quantity: str

    @property
    def is_suppressed(self) -> bool:
        return self.display_quantity == ""

# ============================================================
# 1. PRÉDICATS & UTILITAIRES PARTAGÉS
# ============================================================

def is_qs(unit) -> bool:
    """ Vrai si l'unité signifie "quantité suffisante" (jamais scalée, toujours affichée "QS"). """
    return normalize_unit(unit).lower() in QS_SYNONYMS

def _finite(value) -> Optional[float]:
    """ Convertit en float fini, sinon None (bool, texte, NaN, infini inclus). """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None

def parse_number(text) -> Optional[float]:
    """
    Lit un nombre saisi à la main ("750", " 1,5 ", "2.25").
    Retourne None pour tout ce qui n'est pas un nombre fini (vide, "abc", "nan", "inf"...).
    """
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return _finite(text)
    if not isinstance(text, str):
        return None
    cleaned = text.strip().replace(",", ".")
    if not cleaned or cleaned.lower().lstrip("+-") in {"nan", "inf", "infinity"}:
        return None
    return _finite(cleaned)

def clamp_servings(servings) -> float:
    """ Un nombre de couverts absent, nul ou négatif vaut 1. """
    number = _finite(servings)
    if number is None:
        return float(MIN_SERVINGS)
    return max(float(MIN_SERVINGS), number)

def _round_half_up(value: float) -> Decimal:
    # repr() donne la représentation décimale la plus courte : 1.005 reste "1.005"
    with localcontext() as ctx:
        ctx.prec = 400  # assez pour le plus grand float fini
        return Decimal(repr(float(value))).quantize(Decimal(1).scaleb(-QUANTITY_DECIMALS), rounding=ROUND_HALF_UP)

def _strip_zeros(number: Decimal) -> str:
    text = f"{number:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text

def format_quantity(value: float) -> str:
    """ Arrondi à 2 décimales (au demi supérieur), sans zéros inutiles : 1.50 -> "1.5", 2.00 -> "2". """
    number = _finite(value)
    if number is None:
        return EMPTY_PLACEHOLDER
    return _strip_zeros(_round_half_up(number))

def format_ratio(ratio: float) -> str:
    """ Indicateur "×N" affiché à côté du nombre de couverts. """
    return f"×{format_quantity(ratio)}"

def step_servings(current, delta: int) -> int:
    """ Boutons +/- : ajoute `delta` couverts, jamais en dessous de 1. """
    return max(MIN_SERVINGS, int(clamp_servings(current)) + int(delta))

def reset_scaling_input(recipe: Recipe) -> ServingsInput:
    """ Bouton "reset" : retour au nombre de couverts de base, champs de règle de trois vidés. """
    return ServingsInput(target_servings=clamp_servings(recipe.base_servings))

# ============================================================
# 2. RATIO RESOLVER
# ============================================================

def _servings_ratio(recipe: Recipe, target_servings) -> float:
    base = clamp_servings(recipe.base_servings)
    target = target_servings if _finite(target_servings) is not None else recipe.base_servings
    return clamp_servings(target) / base

def _find_ingredient(recipe: Recipe, ingredient_id) -> Optional[Ingredient]:
    wanted = str(ingredient_id)
    for ingredient in recipe.ingredients:
        if str(ingredient.id) == wanted:
            return ingredient
    return None

def _try_cross_multiply(recipe: Recipe, scaling_input: CrossMultiplyInput):
    """
    Tente la règle de trois.
    Retourne (ratio, mode) OU (None, "raison de l'échec") ; ne lève jamais.
    """
    have = parse_number(scaling_input.have)
    if have is None or have <= 0:
        return None, "quantité disponible absente ou invalide"

    if scaling_input.reference_ingredient_id not in (None, ""):
        reference = _find_ingredient(recipe, scaling_input.reference_ingredient_id)
        if reference is None:
            return None, "ingrédient de référence introuvable"
        if is_qs(reference.unit):
            return None, "ingrédient de référence en QS"
        base = _finite(reference.quantity)
        mode = "cross_multiply_reference"
    else:
        base = _finite(scaling_input.manual_base)
        mode = "cross_multiply_manual"

    if base is None or base <= 0:
        return None, "quantité de base absente ou nulle"

    ratio = have / base
    if not math.isfinite(ratio) or ratio <= 0:
        return None, "ratio hors limites"
    return (ratio, mode), None

def resolve_with_mode(recipe: Recipe, scaling_input: ScalingInput) -> tuple[float, str]:
    """
    Calcule le coefficient à appliquer et indique la branche utilisée.

    Modes retournés :
      - "servings"                  : couverts cibles / couverts de base
      - "cross_multiply_reference"  : quantité disponible / quantité de l'ingrédient de référence
      - "cross_multiply_manual"     : quantité disponible / base saisie à la main
      - "fallback"                  : saisie incomplète ou invalide -> ratio des couverts courants

    Le ratio est toujours fini et strictement positif.
    """
    if getattr(scaling_input, "mode", None) == "crossMultiply":
        result, _reason = _try_cross_multiply(recipe, scaling_input)
        if result is not None:
            return result
        return _servings_ratio(recipe, scaling_input.target_servings), "fallback"

    if getattr(scaling_input, "mode", None) == "servings":
        return _servings_ratio(recipe, scaling_input.target_servings), "servings"

    return _servings_ratio(recipe, None), "fallback"

def resolve(recipe: Recipe, scaling_input: ScalingInput) -> float:
    return resolve_with_mode(recipe, scaling_input)[0]

# ============================================================
# 3. INGREDIENT SCALER
# ============================================================

def display_quantity(ingredient: Ingredient, ratio: float) -> str:
    """
    Règles d'affichage d'une quantité :
    - unité QS => "QS" (jamais "0 QS"), quel que soit le ratio
    - quantité absente => l'unité seule si elle existe (ex: "PM"), sinon "—"
    - quantité scalée arrondie à 0 => "" (ligne masquée)
    - sinon => quantité scalée + unité
    """
    unit = normalize_unit(ingredient.unit)
    if is_qs(unit):
        return QS_LABEL

    quantity = _finite(ingredient.quantity)
    if quantity is None:
        return unit or EMPTY_PLACEHOLDER

    scaled = quantity * ratio
    if not math.isfinite(scaled):
        return EMPTY_PLACEHOLDER
    rounded = _round_half_up(scaled)
    if rounded == 0:
        return ""
    return f"{_strip_zeros(rounded)} {unit}".strip()

def scale(recipe: Recipe, ratio: float) -> list[ScaledRow]:
    """ Une ligne par ingrédient, dans l'ordre d'origine. """
    rows = []
    for ingredient in recipe.ingredients:
        label = (ingredient.designation or "").strip() or EMPTY_PLACEHOLDER
        rows.append(ScaledRow(ingredient_id=str(ingredient.id), label=label,
                              display_quantity=display_quantity(ingredient, ratio)))
    return rows

def visible_rows(rows) -> list[ScaledRow]:
    """ Lignes à afficher : les lignes masquées (quantité vide) sont retirées. """
    return [row for row in rows if not row.is_suppressed]

def scale_sections(recipe: Recipe, ratio: float) -> list[dict]:
    """
    Regroupe le résultat de `scale` par section, dans l'ordre des sections.
    Les ids de section qui ne correspondent à aucun ingrédient de la recette sont ignorés.
    """
    rows_by_id = {row.ingredient_id: row for row in scale(recipe, ratio)}
    grouped = []
    for section in recipe.sections:
        rows = [rows_by_id[str(i)] for i in section.ingredient_ids if str(i) in rows_by_id]
        grouped.append({"id": str(section.id), "title": section.title, "instructions": section.instructions, "rows": rows})
    return grouped
