"""Errors raised by meal plan generation."""

from datetime import date

from meal_plan_generator.domain.plans import CalorieBand, MealSlot


class CatalogGapError(RuntimeError):
    """No recipe in the catalog fits a slot, even in the extended band."""

    def __init__(
        self,
        slot: MealSlot,
        meal_date: date,
        band: CalorieBand,
        extended_band: CalorieBand,
    ) -> None:
        self.slot = slot
        self.meal_date = meal_date
        self.band = band
        self.extended_band = extended_band
        super().__init__(
            f"No recipe found for {slot.value} on {meal_date.isoformat()}: "
            f"tried {round(band.min_calories)}-{round(band.max_calories)} kcal "
            f"and extended range {round(extended_band.min_calories)}-"
            f"{round(extended_band.max_calories)} kcal"
        )


class PlanConsistencyError(RuntimeError):
    """Generated assignments do not cover every (date, slot) pair exactly once."""

    def __init__(self, expected: int, actual: int, detail: str = "") -> None:
        self.expected = expected
        self.actual = actual
        message = f"Invalid number of planned meals: {actual}, expected {expected}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ProfileNotFoundError(LookupError):
    """No planning profile exists for the user."""


class IncompleteProfileError(ValueError):
    """The profile lacks nutrition targets required for planning."""
