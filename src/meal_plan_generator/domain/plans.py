"""Domain models for meal plans."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meal_plan_generator.domain.recipes import Recipe


class MealSlot(Enum):
    """Meal occasions within a day."""

    BREAKFAST = "breakfast"
    SNACK_MORNING = "snack_morning"
    LUNCH = "lunch"
    SNACK_AFTERNOON = "snack_afternoon"
    DINNER = "dinner"
    SNACK = "snack"

    @property
    def search_category(self) -> "MealSlot":
        """Catalog bucket used when searching recipes for this slot."""
        if self in {MealSlot.SNACK_MORNING, MealSlot.SNACK_AFTERNOON}:
            return MealSlot.SNACK
        return self


class PlanType(Enum):
    """Meal plan layouts a user can choose from."""

    THREE_MAIN_TWO_SNACKS = "3_main_2_snacks"
    THREE_MAIN_ONE_SNACK = "3_main_1_snack"
    THREE_MAIN = "3_main"
    TWO_MAIN = "2_main"


@dataclass(frozen=True)
class PlanConfiguration:
    """Ordered slots of a plan type and their share of daily calories."""

    plan_type: PlanType
    slots: tuple[MealSlot, ...]
    calorie_fractions: dict[MealSlot, float]

    def fraction_for(self, slot: MealSlot) -> float:
        """Return the share of daily calories assigned to a slot."""
        fraction = self.calorie_fractions.get(slot)
        if not fraction:
            return 1 / len(self.slots)
        return fraction


@dataclass(frozen=True)
class CalorieBand:
    """Calorie range a recipe must fall into for a slot."""

    target: float
    min_calories: float
    max_calories: float

    @classmethod
    def around(cls, target: float, tolerance: float) -> "CalorieBand":
        """Build a band of +/- tolerance around a target."""
        return cls(
            target=target,
            min_calories=target * (1 - tolerance),
            max_calories=target * (1 + tolerance),
        )

    def contains(self, calories: float) -> bool:
        return self.min_calories <= calories <= self.max_calories


@dataclass(frozen=True)
class IngredientOverride:
    """Replacement amount for one ingredient of an assigned recipe."""

    ingredient_id: int
    new_amount: float
    auto_adjusted: bool = True

    def to_payload(self) -> dict[str, object]:
        return {
            "ingredient_id": self.ingredient_id,
            "new_amount": self.new_amount,
            "auto_adjusted": self.auto_adjusted,
        }


@dataclass
class MealAssignment:
    """A recipe assigned to one slot on one date."""

    meal_date: date
    slot: MealSlot
    recipe: "Recipe"
    ingredient_overrides: list[IngredientOverride] | None = None

    @property
    def recipe_id(self) -> int:
        return self.recipe.id

    def replace_override(self, override: IngredientOverride) -> None:
        """Set an override, superseding any previous one for the ingredient."""
        remaining = [
            existing
            for existing in self.ingredient_overrides or []
            if existing.ingredient_id != override.ingredient_id
        ]
        remaining.append(override)
        self.ingredient_overrides = remaining

    def to_row(self, user_id: object) -> dict[str, object]:
        """Serialize the assignment into a planned meal row."""
        overrides = (
            [override.to_payload() for override in self.ingredient_overrides]
            if self.ingredient_overrides
            else None
        )
        return {
            "user_id": str(user_id),
            "meal_date": self.meal_date.isoformat(),
            "meal_type": self.slot.value,
            "recipe_id": self.recipe_id,
            "is_eaten": False,
            "ingredient_overrides": overrides,
        }


@dataclass
class DayPlan:
    """All slot assignments for a single date."""

    meal_date: date
    assignments: list[MealAssignment] = field(default_factory=list)

    def to_rows(self, user_id: object) -> list[dict[str, object]]:
        return [assignment.to_row(user_id) for assignment in self.assignments]
