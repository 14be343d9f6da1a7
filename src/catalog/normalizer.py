"""Normalize raw catalog records into Recipe models.

The catalog returns one flat object per meal with up to 20 positional
ingredient/measure pairs (strIngredient1..20, strMeasure1..20), any of which
may be null, empty or whitespace. normalize() turns that into a Recipe with a
clean ingredient list and tag list.
"""

from typing import Any, Mapping, Optional

from src.models.models import Recipe

INGREDIENT_SLOT_COUNT = 20

# Catalog placeholder meaning "no measure"
_EMPTY_MEASURE = "0"


def _optional_str(value: Any) -> Optional[str]:
    """Pass strings through untouched; anything else becomes None."""
    return value if isinstance(value, str) else None


def ingredient_slots(wire: Mapping[str, Any]) -> list[tuple[Optional[str], Optional[str]]]:
    """Read the positional ingredient fields into an ordered list of (name, measure) pairs.

    Always returns INGREDIENT_SLOT_COUNT pairs, position 1 first. Missing or
    non-string fields are None.
    """
    return [
        (
            _optional_str(wire.get(f"strIngredient{position}")),
            _optional_str(wire.get(f"strMeasure{position}")),
        )
        for position in range(1, INGREDIENT_SLOT_COUNT + 1)
    ]


def format_ingredient(name: Optional[str], measure: Optional[str]) -> Optional[str]:
    """Combine one slot into "<measure> <name>" or "<name>".

    Returns None when the slot has no usable ingredient name.
    """
    clean_name = name.strip() if name else ""
    if not clean_name:
        return None

    clean_measure = measure.strip() if measure else ""
    if clean_measure and clean_measure != _EMPTY_MEASURE:
        return f"{clean_measure} {clean_name}"
    return clean_name


def parse_tags(raw_tags: Any) -> Optional[list[str]]:
    """Split a comma-delimited tag string, keeping order and duplicates."""
    if not isinstance(raw_tags, str):
        return None
    return [tag.strip() for tag in raw_tags.split(",") if tag.strip()]


def normalize(wire: Mapping[str, Any]) -> Recipe:
    """Convert one wire record into a Recipe.

    Args:
        wire: Raw meal object from the catalog. Must carry idMeal and strMeal.

    Returns:
        Recipe with ingredients in ascending slot order and optional fields
        set to None where the catalog left them null.
    """
    ingredients = []
    for name, measure in ingredient_slots(wire):
        ingredient = format_ingredient(name, measure)
        if ingredient is not None:
            ingredients.append(ingredient)

    return Recipe(
        id=str(wire["idMeal"]),
        name=str(wire["strMeal"]),
        category=_optional_str(wire.get("strCategory")),
        cuisine=_optional_str(wire.get("strArea")),
        instructions=_optional_str(wire.get("strInstructions")),
        ingredients=ingredients,
        image=_optional_str(wire.get("strMealThumb")),
        source=_optional_str(wire.get("strSource")),
        tags=parse_tags(wire.get("strTags")),
    )
