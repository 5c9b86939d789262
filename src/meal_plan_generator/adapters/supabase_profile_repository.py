"""Supabase repository for planning profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_plan_generator.domain.nutrition import NutritionTargets
from meal_plan_generator.domain.plans import MealSlot, PlanType
from meal_plan_generator.domain.profiles import UserProfile
from meal_plan_generator.services.meal_plans import ProfileRepository

_TARGET_COLUMNS = (
    "target_calories",
    "target_protein_g",
    "target_fats_g",
    "target_carbs_g",
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase-backed planning profile lookups."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the planning profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select(
                "id, target_calories, target_carbs_g, target_protein_g, "
                "target_fats_g, meal_plan_type, selected_meals, "
                "excluded_equipment_ids"
            )
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    targets = None
    if all(row.get(column) is not None for column in _TARGET_COLUMNS):
        targets = NutritionTargets(
            calories=float(row["target_calories"]),
            protein_g=float(row["target_protein_g"]),
            fat_g=float(row["target_fats_g"]),
            carbs_g=float(row["target_carbs_g"]),
        )
    selected_raw = row.get("selected_meals")
    selected = (
        tuple(MealSlot(value) for value in selected_raw if value in _SLOT_VALUES)
        if isinstance(selected_raw, list)
        else None
    )
    return UserProfile(
        id=UUID(str(row["id"])),
        targets=targets,
        plan_type=PlanType(row.get("meal_plan_type") or PlanType.THREE_MAIN.value),
        selected_slots=selected,
        excluded_equipment_ids=frozenset(
            int(value) for value in row.get("excluded_equipment_ids") or []
        ),
    )


_SLOT_VALUES = {slot.value for slot in MealSlot}
