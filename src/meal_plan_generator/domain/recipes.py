"""Domain models for the recipe catalog."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from meal_plan_generator.domain.nutrition import Nutrient
from meal_plan_generator.domain.plans import MealSlot


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient row of a recipe with its contribution at base amount."""

    ingredient_id: int
    base_amount: float
    unit: str
    is_scalable: bool
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float

    def contribution(self, nutrient: Nutrient) -> float:
        """Return the nutrient contribution at the base amount."""
        return float(getattr(self, nutrient.value))


@dataclass(frozen=True)
class Recipe:
    """Catalog recipe with whole-recipe nutrition totals."""

    id: int
    name: str
    meal_slots: frozenset[MealSlot]
    total_calories: float
    total_protein_g: float
    total_fat_g: float
    total_carbs_g: float
    base_servings: int = 1
    is_batch_friendly: bool = False
    ingredients: tuple[RecipeIngredient, ...] = ()
    required_equipment_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_batch_cookable(self) -> bool:
        """Whether the recipe should be spread across several days."""
        return self.is_batch_friendly and self.base_servings > 1

    def requires_any(self, equipment_ids: Iterable[int]) -> bool:
        """Return True if the recipe needs any of the given equipment."""
        return not self.required_equipment_ids.isdisjoint(equipment_ids)
