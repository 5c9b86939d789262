"""Supabase repository for planned meals."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_plan_generator.domain.plans import MealSlot
from meal_plan_generator.services.meal_plans import PlannedMealRepository


@dataclass
class SupabasePlannedMealRepository(PlannedMealRepository):
    """Supabase implementation for planned meal rows."""

    client: Client

    def list_assigned_slots(
        self, user_id: UUID, dates: Sequence[date]
    ) -> set[tuple[date, MealSlot]]:
        """Return (date, slot) pairs already planned for the dates."""
        if not dates:
            return set()
        response = (
            self.client.table("planned_meals")
            .select("meal_date, meal_type")
            .eq("user_id", str(user_id))
            .in_("meal_date", [meal_date.isoformat() for meal_date in dates])
            .execute()
        )
        return {
            (date.fromisoformat(str(row["meal_date"])), MealSlot(row["meal_type"]))
            for row in response.data or []
        }

    def has_eaten_meals(self, user_id: UUID, meal_date: date) -> bool:
        """Return True if any meal on the date is marked as eaten."""
        response = (
            self.client.table("planned_meals")
            .select("id")
            .eq("user_id", str(user_id))
            .eq("meal_date", meal_date.isoformat())
            .eq("is_eaten", True)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def delete_before(self, user_id: UUID, meal_date: date) -> int:
        """Delete planned meals dated before the given date."""
        response = (
            self.client.table("planned_meals")
            .delete()
            .eq("user_id", str(user_id))
            .lt("meal_date", meal_date.isoformat())
            .execute()
        )
        return len(response.data or [])

    def delete_for_dates(self, user_id: UUID, dates: Sequence[date]) -> None:
        """Delete planned meals on the given dates."""
        if not dates:
            return
        self.client.table("planned_meals").delete().eq("user_id", str(user_id)).in_(
            "meal_date", [meal_date.isoformat() for meal_date in dates]
        ).execute()

    def insert_planned_meals(self, rows: list[dict[str, object]]) -> None:
        """Insert planned meal rows in bulk."""
        if not rows:
            return
        response = self.client.table("planned_meals").insert(rows).execute()
        if not response.data:
            raise RuntimeError("Failed to insert planned meals")
