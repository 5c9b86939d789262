"""Multi-day meal plan generation."""

import logging
import random
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from uuid import UUID

from meal_plan_generator.domain.errors import CatalogGapError, PlanConsistencyError
from meal_plan_generator.domain.nutrition import NutritionTargets
from meal_plan_generator.domain.plans import DayPlan, MealSlot, PlanConfiguration
from meal_plan_generator.services.assembler import DayAssembler
from meal_plan_generator.services.batch import BatchAllocator
from meal_plan_generator.services.catalog import CatalogIndex, CatalogRepository
from meal_plan_generator.services.optimizer import (
    MAX_OPTIMIZATION_PASSES,
    DayOptimizer,
)
from meal_plan_generator.services.selector import RecipeSelector

_logger = logging.getLogger(__name__)


@dataclass
class MealPlanGenerator:
    """Generate optimized day plans for a sequence of dates."""

    catalog_repository: CatalogRepository
    rng: random.Random = field(default_factory=random.Random)
    max_optimization_passes: int = MAX_OPTIMIZATION_PASSES
    debug: bool = False

    def generate(  # noqa: PLR0913
        self,
        user_id: UUID,
        dates: Sequence[date],
        targets: NutritionTargets,
        configuration: PlanConfiguration,
        excluded_equipment_ids: Iterable[int] = (),
    ) -> list[DayPlan]:
        """Return one optimized plan per date, in order.

        The catalog is fetched once per call. Batch reservations only live
        for the duration of the call.
        """
        if not dates:
            return []

        try:
            index = CatalogIndex.load(self.catalog_repository, excluded_equipment_ids)
            assembler = DayAssembler(
                selector=RecipeSelector(index=index, rng=self.rng),
                configuration=configuration,
                targets=targets,
                debug=self.debug,
            )
            optimizer = DayOptimizer(
                targets=targets,
                max_passes=self.max_optimization_passes,
                debug=self.debug,
            )
            allocator = BatchAllocator()

            days: list[DayPlan] = []
            for day_index in range(len(dates)):
                day = assembler.assemble(dates, day_index, allocator)
                optimizer.optimize(day)
                days.append(day)

            validate_coverage(days, dates, configuration)
        except (CatalogGapError, PlanConsistencyError):
            _logger.exception(
                "Meal plan generation failed: user=%s days=%s plan_type=%s",
                user_id,
                len(dates),
                configuration.plan_type.value,
            )
            raise

        _logger.info(
            "Meal plan generated: user=%s days=%s meals=%s",
            user_id,
            len(days),
            sum(len(day.assignments) for day in days),
        )
        return days


def validate_coverage(
    days: Sequence[DayPlan],
    dates: Sequence[date],
    configuration: PlanConfiguration,
) -> None:
    """Ensure every (date, slot) pair is assigned exactly once."""
    expected = len(dates) * len(configuration.slots)
    keys = [
        (assignment.meal_date, assignment.slot)
        for day in days
        for assignment in day.assignments
    ]
    if len(keys) != expected:
        raise PlanConsistencyError(expected=expected, actual=len(keys))

    duplicates = [key for key, count in Counter(keys).items() if count > 1]
    if duplicates:
        meal_date, slot = duplicates[0]
        raise PlanConsistencyError(
            expected=expected,
            actual=len(keys),
            detail=f"duplicate {slot.value} on {meal_date.isoformat()}",
        )


def find_missing_days(
    existing_assignments: Iterable[tuple[date, MealSlot]],
    dates: Sequence[date],
    configuration: PlanConfiguration,
) -> list[date]:
    """Return the dates whose configured slots are not all assigned."""
    slots_by_date: dict[date, set[MealSlot]] = defaultdict(set)
    for meal_date, slot in existing_assignments:
        slots_by_date[meal_date].add(slot)

    expected = set(configuration.slots)
    return [
        meal_date
        for meal_date in dates
        if not expected.issubset(slots_by_date.get(meal_date, set()))
    ]


def generate_dates(start: date, days: int) -> list[date]:
    """Return ``days`` consecutive dates beginning at ``start``."""
    return [start + timedelta(days=offset) for offset in range(days)]
