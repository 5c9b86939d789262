"""Cross-day reservations for batch-cooked recipes."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from meal_plan_generator.domain.plans import IngredientOverride, MealSlot
from meal_plan_generator.domain.recipes import Recipe


@dataclass(frozen=True)
class BatchReservation:
    """A serving of a batch-cooked recipe held for a later date."""

    recipe: Recipe
    ingredient_overrides: tuple[IngredientOverride, ...] | None
    remaining_servings: int


@dataclass
class BatchAllocator:
    """Reservation map keyed by (date, slot), owned by one generation run."""

    reservations: dict[tuple[date, MealSlot], BatchReservation] = field(
        default_factory=dict
    )

    def reserve(  # noqa: PLR0913
        self,
        slot: MealSlot,
        recipe: Recipe,
        ingredient_overrides: Sequence[IngredientOverride] | None,
        from_date_index: int,
        dates: Sequence[date],
    ) -> list[date]:
        """Hold the remaining servings on the same slot of the following dates.

        Existing reservations are never overwritten. Returns the dates that
        received a reservation.
        """
        if not recipe.is_batch_cookable:
            return []
        servings_to_allocate = recipe.base_servings - 1
        overrides = tuple(ingredient_overrides) if ingredient_overrides else None
        reserved: list[date] = []
        for offset in range(1, servings_to_allocate + 1):
            day_index = from_date_index + offset
            if day_index >= len(dates):
                break
            key = (dates[day_index], slot)
            if key in self.reservations:
                continue
            self.reservations[key] = BatchReservation(
                recipe=recipe,
                ingredient_overrides=overrides,
                remaining_servings=servings_to_allocate - offset + 1,
            )
            reserved.append(dates[day_index])
        return reserved

    def consume(self, meal_date: date, slot: MealSlot) -> BatchReservation | None:
        """Take the reservation for a date and slot, removing it."""
        return self.reservations.pop((meal_date, slot), None)

    def __len__(self) -> int:
        return len(self.reservations)
