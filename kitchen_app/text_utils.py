import unicodedata

def normalize_spaces(value):
    """ Normalise une chaîne (strip, espaces internes réduits), casse conservée """
    if isinstance(value, str):  # Vérifie que c'est bien une chaîne
        return " ".join(value.split())
    return value  # Retourne la valeur telle quelle si ce n'est pas une chaîne

def normalize_unit(value) -> str:
    """ Unité prête à l'affichage : NFC, strip, espaces internes réduits. Casse conservée. None -> "". """
    if not isinstance(value, str):
        return ""
    return normalize_spaces(unicodedata.normalize("NFC", value))
