"""Draft day plans from batch reservations and recipe selection."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from meal_plan_generator.domain.errors import CatalogGapError
from meal_plan_generator.domain.nutrition import NutritionTargets
from meal_plan_generator.domain.plans import DayPlan, MealAssignment, PlanConfiguration
from meal_plan_generator.services.batch import BatchAllocator
from meal_plan_generator.services.plan_config import slot_calorie_band
from meal_plan_generator.services.selector import RecipeSelector, extended_band_for

_logger = logging.getLogger(__name__)


@dataclass
class DayAssembler:
    """Resolve every configured slot of a date to a recipe."""

    selector: RecipeSelector
    configuration: PlanConfiguration
    targets: NutritionTargets
    debug: bool = False

    def assemble(
        self,
        dates: Sequence[date],
        day_index: int,
        allocator: BatchAllocator,
    ) -> DayPlan:
        """Build the draft plan for ``dates[day_index]``.

        Raises CatalogGapError when a slot cannot be filled.
        """
        meal_date = dates[day_index]
        day = DayPlan(meal_date=meal_date)
        used_recipe_ids: set[int] = set()

        for slot in self.configuration.slots:
            reservation = allocator.consume(meal_date, slot)
            if reservation is not None:
                used_recipe_ids.add(reservation.recipe.id)
                day.assignments.append(
                    MealAssignment(
                        meal_date=meal_date,
                        slot=slot,
                        recipe=reservation.recipe,
                        ingredient_overrides=(
                            list(reservation.ingredient_overrides)
                            if reservation.ingredient_overrides
                            else None
                        ),
                    )
                )
                if self.debug:
                    _logger.info(
                        "Batch serving used: date=%s slot=%s recipe=%s remaining=%s",
                        meal_date,
                        slot.value,
                        reservation.recipe.id,
                        reservation.remaining_servings,
                    )
                continue

            band = slot_calorie_band(self.targets.calories, slot, self.configuration)
            selection = self.selector.select(slot, band, used_recipe_ids)
            if selection is None:
                raise CatalogGapError(
                    slot=slot,
                    meal_date=meal_date,
                    band=band,
                    extended_band=extended_band_for(band),
                )

            recipe = selection.recipe
            used_recipe_ids.add(recipe.id)
            day.assignments.append(
                MealAssignment(
                    meal_date=meal_date,
                    slot=slot,
                    recipe=recipe,
                    ingredient_overrides=(
                        list(selection.ingredient_overrides)
                        if selection.ingredient_overrides
                        else None
                    ),
                )
            )
            reserved = allocator.reserve(
                slot, recipe, selection.ingredient_overrides, day_index, dates
            )
            if self.debug and reserved:
                _logger.info(
                    "Batch cooking: recipe=%s slot=%s reserved_days=%s",
                    recipe.id,
                    slot.value,
                    len(reserved),
                )

        return day
