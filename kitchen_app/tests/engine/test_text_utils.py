import pytest
from kitchen_app.text_utils import normalize_spaces, normalize_unit

@pytest.mark.parametrize("value, expected", [("  Pâte   sablée ", "Pâte sablée"), ("", ""), (None, None), (3, 3)])
def test_normalize_spaces(value, expected):
    assert normalize_spaces(value) == expected

def test_normalize_unit_composes_accents():
    decomposed = "pince\u0301e"
    assert normalize_unit(f"  {decomposed} ") == "pinc\u00e9e"
    assert normalize_unit(None) == ""
