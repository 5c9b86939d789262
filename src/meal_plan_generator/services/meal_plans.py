"""Application service for the "generate my plan" action."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from meal_plan_generator.domain.errors import (
    IncompleteProfileError,
    ProfileNotFoundError,
)
from meal_plan_generator.domain.plans import MealSlot
from meal_plan_generator.domain.profiles import UserProfile
from meal_plan_generator.services.generator import (
    MealPlanGenerator,
    find_missing_days,
    generate_dates,
)
from meal_plan_generator.services.plan_config import resolve_plan_configuration

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for planning profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the planning profile for a user, if present."""


class PlannedMealRepository(Protocol):
    """Persistence interface for planned meals."""

    def list_assigned_slots(
        self, user_id: UUID, dates: Sequence[date]
    ) -> set[tuple[date, MealSlot]]:
        """Return the (date, slot) pairs already planned for the dates."""

    def has_eaten_meals(self, user_id: UUID, meal_date: date) -> bool:
        """Return True if any meal on the date is marked as eaten."""

    def delete_before(self, user_id: UUID, meal_date: date) -> int:
        """Delete planned meals dated before the given date."""

    def delete_for_dates(self, user_id: UUID, dates: Sequence[date]) -> None:
        """Delete planned meals on the given dates."""

    def insert_planned_meals(self, rows: list[dict[str, object]]) -> None:
        """Insert planned meal rows in bulk."""


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a plan generation request."""

    generated_days: list[date]
    meal_count: int

    @property
    def already_planned(self) -> bool:
        return not self.generated_days


@dataclass
class MealPlanService:
    """Top up a user's meal plan for the coming days."""

    profile_repository: ProfileRepository
    planned_meal_repository: PlannedMealRepository
    generator: MealPlanGenerator
    horizon_days: int = 7

    def generate_for_user(
        self, user_id: UUID, today: date | None = None
    ) -> GenerationResult:
        """Generate plans for every day of the horizon lacking a full plan.

        Days that are already complete are kept. If a meal was eaten today,
        the horizon starts tomorrow so today's plan is left untouched.
        """
        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile not found for user {user_id}")
        if profile.targets is None:
            raise IncompleteProfileError(
                "Profile is missing nutrition targets required for planning"
            )

        today = today or date.today()
        self._cleanup_old_plans(user_id, today)

        start = today
        if self.planned_meal_repository.has_eaten_meals(user_id, today):
            start = today + timedelta(days=1)
        dates = generate_dates(start, self.horizon_days)

        configuration = resolve_plan_configuration(
            profile.plan_type, profile.selected_slots
        )
        existing = self.planned_meal_repository.list_assigned_slots(user_id, dates)
        missing_days = find_missing_days(existing, dates, configuration)
        if not missing_days:
            _logger.info("Meal plan already complete: user=%s", user_id)
            return GenerationResult(generated_days=[], meal_count=0)

        days = self.generator.generate(
            user_id,
            missing_days,
            profile.targets,
            configuration,
            profile.excluded_equipment_ids,
        )
        rows = [row for day in days for row in day.to_rows(user_id)]

        # Rows left over from a previous plan type would collide with new ones.
        self.planned_meal_repository.delete_for_dates(user_id, missing_days)
        self.planned_meal_repository.insert_planned_meals(rows)
        return GenerationResult(generated_days=missing_days, meal_count=len(rows))

    def _cleanup_old_plans(self, user_id: UUID, today: date) -> None:
        try:
            deleted = self.planned_meal_repository.delete_before(user_id, today)
        except Exception:
            _logger.warning("Failed to delete past meal plans", exc_info=True)
            return
        if deleted:
            _logger.info(
                "Deleted past planned meals: user=%s count=%s", user_id, deleted
            )
