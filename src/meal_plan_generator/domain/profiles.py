"""Domain models for user planning profiles."""

from dataclasses import dataclass, field
from uuid import UUID

from meal_plan_generator.domain.nutrition import NutritionTargets
from meal_plan_generator.domain.plans import MealSlot, PlanType


@dataclass(frozen=True)
class UserProfile:
    """Planning preferences and targets stored for a user."""

    id: UUID
    targets: NutritionTargets | None
    plan_type: PlanType
    selected_slots: tuple[MealSlot, ...] | None = None
    excluded_equipment_ids: frozenset[int] = field(default_factory=frozenset)
