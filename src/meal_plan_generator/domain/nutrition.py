"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum


class Nutrient(Enum):
    """Nutrients tracked per ingredient and per day."""

    CALORIES = "calories"
    PROTEIN = "protein_g"
    FAT = "fat_g"
    CARBS = "carbs_g"


MACROS = (Nutrient.PROTEIN, Nutrient.CARBS, Nutrient.FAT)


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients for a recipe or a day."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float

    def value(self, nutrient: Nutrient) -> float:
        """Return the amount of a single nutrient."""
        return float(getattr(self, nutrient.value))

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            fat_g=self.fat_g + other.fat_g,
            carbs_g=self.carbs_g + other.carbs_g,
        )


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class NutritionTargets:
    """Daily nutrition targets computed upstream for a user."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float

    def value(self, nutrient: Nutrient) -> float:
        """Return the daily target for a single nutrient."""
        return float(getattr(self, nutrient.value))
