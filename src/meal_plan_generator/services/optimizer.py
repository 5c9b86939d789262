"""Iterative portion reduction for a drafted day."""

import logging
from dataclasses import dataclass

from meal_plan_generator.domain.nutrition import (
    MACROS,
    MacroProfile,
    Nutrient,
    NutritionTargets,
)
from meal_plan_generator.domain.plans import DayPlan, IngredientOverride
from meal_plan_generator.services.portions import (
    day_totals,
    effective_amount,
    round_within,
)

MAX_OPTIMIZATION_PASSES = 10
MACRO_SURPLUS_THRESHOLD = 1.05
MAX_REDUCTION_FRACTION = 0.2
MIN_AMOUNT_FRACTION = 0.5

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Candidate:
    assignment_index: int
    ingredient_id: int
    per_unit: float
    base_amount: float
    current_amount: float

    @property
    def current_contribution(self) -> float:
        return self.per_unit * self.current_amount


@dataclass
class DayOptimizer:
    """Bring a day's calories under target and trim macro surplus.

    Each pass reduces a single scalable ingredient by at most 20% of its
    current amount and never below half of its base amount. Calories are
    handled first; once they are at target, or cannot be reduced further,
    the macro with the largest surplus above 105% of target is trimmed.
    """

    targets: NutritionTargets
    max_passes: int = MAX_OPTIMIZATION_PASSES
    debug: bool = False

    def optimize(self, day: DayPlan) -> int:
        """Adjust overrides of ``day`` in place and return the number of changes."""
        changes = 0
        calories_exhausted = False
        for _ in range(self.max_passes):
            totals = day_totals(day.assignments)

            if not calories_exhausted and totals.calories > self.targets.calories:
                surplus = totals.calories - self.targets.calories
                if reduce_nutrient(day, Nutrient.CALORIES, surplus):
                    changes += 1
                    continue
                calories_exhausted = True

            macro = macro_to_optimize(totals, self.targets)
            if macro is None:
                break
            surplus = totals.value(macro) - self.targets.value(macro)
            if not reduce_nutrient(day, macro, surplus):
                break
            changes += 1

        if self.debug:
            final = day_totals(day.assignments)
            _logger.info(
                "Day optimized: date=%s changes=%s calories=%s target=%s",
                day.meal_date,
                changes,
                final.calories,
                self.targets.calories,
            )
        return changes


def macro_to_optimize(
    totals: MacroProfile, targets: NutritionTargets
) -> Nutrient | None:
    """Return the macro with the largest surplus above 105% of target."""
    best: Nutrient | None = None
    best_surplus = 0.0
    for macro in MACROS:
        target = targets.value(macro)
        consumed = totals.value(macro)
        if target <= 0 or consumed / target <= MACRO_SURPLUS_THRESHOLD:
            continue
        surplus = consumed - target
        if surplus > best_surplus:
            best, best_surplus = macro, surplus
    return best


def reduce_nutrient(day: DayPlan, nutrient: Nutrient, surplus: float) -> bool:
    """Reduce the largest contributor of a nutrient once.

    Returns False when no scalable ingredient can be reduced by a full
    rounding step.
    """
    candidates = _collect_candidates(day, nutrient)
    if not candidates or surplus <= 0:
        return False

    best = max(candidates, key=lambda candidate: candidate.current_contribution)
    floor = best.base_amount * MIN_AMOUNT_FRACTION
    reduction = min(
        surplus / best.per_unit,
        best.current_amount * MAX_REDUCTION_FRACTION,
    )
    new_amount = max(floor, best.current_amount - reduction)
    rounded = round_within(new_amount, floor, best.current_amount)
    if rounded >= best.current_amount:
        return False

    day.assignments[best.assignment_index].replace_override(
        IngredientOverride(
            ingredient_id=best.ingredient_id,
            new_amount=rounded,
            auto_adjusted=True,
        )
    )
    return True


def _collect_candidates(day: DayPlan, nutrient: Nutrient) -> list[_Candidate]:
    candidates: list[_Candidate] = []
    for index, assignment in enumerate(day.assignments):
        for ingredient in assignment.recipe.ingredients:
            value = ingredient.contribution(nutrient)
            if not ingredient.is_scalable or value <= 0 or ingredient.base_amount <= 0:
                continue
            current = effective_amount(ingredient, assignment.ingredient_overrides)
            if current <= ingredient.base_amount * MIN_AMOUNT_FRACTION:
                continue
            candidates.append(
                _Candidate(
                    assignment_index=index,
                    ingredient_id=ingredient.ingredient_id,
                    per_unit=value / ingredient.base_amount,
                    base_amount=ingredient.base_amount,
                    current_amount=current,
                )
            )
    return candidates
