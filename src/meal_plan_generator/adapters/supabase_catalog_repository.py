"""Supabase implementation of the recipe catalog."""

from collections.abc import Iterable
from dataclasses import dataclass

from supabase import Client

from meal_plan_generator.domain.plans import MealSlot
from meal_plan_generator.domain.recipes import Recipe, RecipeIngredient
from meal_plan_generator.services.catalog import CatalogRepository

_RECIPE_COLUMNS = """
    id,
    name,
    meal_types,
    total_calories,
    total_protein_g,
    total_carbs_g,
    total_fats_g,
    base_servings,
    is_batch_friendly,
    recipe_ingredients (
        ingredient_id,
        base_amount,
        unit,
        is_scalable,
        calories,
        protein_g,
        carbs_g,
        fats_g
    ),
    recipe_equipment (
        equipment_id
    )
"""


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed recipe catalog."""

    client: Client

    def fetch_recipes(self, excluded_equipment_ids: Iterable[int]) -> list[Recipe]:
        """Return all recipes with calories, minus those needing excluded equipment."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .not_.is_("total_calories", "null")
            .order("total_calories", desc=False)
            .execute()
        )
        excluded = frozenset(excluded_equipment_ids)
        recipes = [
            _parse_recipe(row)
            for row in response.data or []
            if row.get("total_calories") is not None
        ]
        return [recipe for recipe in recipes if not recipe.requires_any(excluded)]


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row with nested ingredients and equipment."""
    slots = frozenset(
        MealSlot(value)
        for value in row.get("meal_types") or []
        if value in _SLOT_VALUES
    )
    ingredients = tuple(
        _parse_ingredient(item) for item in row.get("recipe_ingredients") or []
    )
    equipment = frozenset(
        int(item["equipment_id"])
        for item in row.get("recipe_equipment") or []
        if item.get("equipment_id") is not None
    )
    return Recipe(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        meal_slots=slots,
        total_calories=float(row["total_calories"]),
        total_protein_g=float(row.get("total_protein_g") or 0.0),
        total_fat_g=float(row.get("total_fats_g") or 0.0),
        total_carbs_g=float(row.get("total_carbs_g") or 0.0),
        base_servings=max(1, int(row.get("base_servings") or 1)),
        is_batch_friendly=bool(row.get("is_batch_friendly", False)),
        ingredients=ingredients,
        required_equipment_ids=equipment,
    )


def _parse_ingredient(row: dict[str, object]) -> RecipeIngredient:
    return RecipeIngredient(
        ingredient_id=int(row["ingredient_id"]),
        base_amount=float(row.get("base_amount") or 0.0),
        unit=str(row.get("unit", "")),
        is_scalable=bool(row.get("is_scalable", False)),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        fat_g=float(row.get("fats_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
    )


_SLOT_VALUES = {slot.value for slot in MealSlot}
