
# Synonymes de "quantité suffisante" (comparés après strip + minuscules).
# Un ingrédient QS n'est jamais scalé et s'affiche toujours avec le libellé QS_LABEL.
QS_SYNONYMS = frozenset({"qs", "q.s", "q.s.", "quantité suffisante"})
QS_LABEL = "QS"

# Affiché à la place d'une quantité ou d'un libellé absent
EMPTY_PLACEHOLDER = "—"

# Arrondi des quantités affichées (au demi supérieur)
QUANTITY_DECIMALS = 2

# Plancher des nombres de couverts (base et cible)
MIN_SERVINGS = 1

# Modes de scaling acceptés par l'API
SCALING_MODE_CHOICES = [
    ("servings", "Nombre de couverts"),
    ("crossMultiply", "Règle de trois"),
]
