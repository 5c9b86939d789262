"""Plan type layouts and per-slot calorie bands."""

from collections.abc import Sequence

from meal_plan_generator.domain.plans import (
    CalorieBand,
    MealSlot,
    PlanConfiguration,
    PlanType,
)

CALORIE_TOLERANCE = 0.15
EARLIER_MEAL_FRACTION = 0.45
LATER_MEAL_FRACTION = 0.55

SLOT_ORDER = (
    MealSlot.BREAKFAST,
    MealSlot.SNACK_MORNING,
    MealSlot.LUNCH,
    MealSlot.SNACK_AFTERNOON,
    MealSlot.DINNER,
)

PLAN_CONFIGURATIONS: dict[PlanType, PlanConfiguration] = {
    PlanType.THREE_MAIN_TWO_SNACKS: PlanConfiguration(
        plan_type=PlanType.THREE_MAIN_TWO_SNACKS,
        slots=SLOT_ORDER,
        calorie_fractions={
            MealSlot.BREAKFAST: 0.25,
            MealSlot.SNACK_MORNING: 0.1,
            MealSlot.LUNCH: 0.3,
            MealSlot.SNACK_AFTERNOON: 0.1,
            MealSlot.DINNER: 0.25,
        },
    ),
    PlanType.THREE_MAIN_ONE_SNACK: PlanConfiguration(
        plan_type=PlanType.THREE_MAIN_ONE_SNACK,
        slots=(
            MealSlot.BREAKFAST,
            MealSlot.LUNCH,
            MealSlot.SNACK_AFTERNOON,
            MealSlot.DINNER,
        ),
        calorie_fractions={
            MealSlot.BREAKFAST: 0.25,
            MealSlot.LUNCH: 0.3,
            MealSlot.SNACK_AFTERNOON: 0.15,
            MealSlot.DINNER: 0.3,
        },
    ),
    PlanType.THREE_MAIN: PlanConfiguration(
        plan_type=PlanType.THREE_MAIN,
        slots=(MealSlot.BREAKFAST, MealSlot.LUNCH, MealSlot.DINNER),
        calorie_fractions={
            MealSlot.BREAKFAST: 0.3,
            MealSlot.LUNCH: 0.35,
            MealSlot.DINNER: 0.35,
        },
    ),
    PlanType.TWO_MAIN: PlanConfiguration(
        plan_type=PlanType.TWO_MAIN,
        slots=(MealSlot.LUNCH, MealSlot.DINNER),
        calorie_fractions={
            MealSlot.LUNCH: EARLIER_MEAL_FRACTION,
            MealSlot.DINNER: LATER_MEAL_FRACTION,
        },
    ),
}


def resolve_plan_configuration(
    plan_type: PlanType, selected_slots: Sequence[MealSlot] | None = None
) -> PlanConfiguration:
    """Return the slot layout for a plan type.

    For two-meal plans the user picks the two slots; they are ordered by time
    of day and the earlier one gets the smaller share. Any other selection
    falls back to the default layout.
    """
    if (
        plan_type is PlanType.TWO_MAIN
        and selected_slots
        and len(set(selected_slots)) == 2  # noqa: PLR2004
        and all(slot in SLOT_ORDER for slot in selected_slots)
    ):
        first, second = sorted(set(selected_slots), key=SLOT_ORDER.index)
        return PlanConfiguration(
            plan_type=plan_type,
            slots=(first, second),
            calorie_fractions={
                first: EARLIER_MEAL_FRACTION,
                second: LATER_MEAL_FRACTION,
            },
        )
    return PLAN_CONFIGURATIONS[plan_type]


def slot_calorie_band(
    daily_calories: float, slot: MealSlot, configuration: PlanConfiguration
) -> CalorieBand:
    """Return the standard calorie band for a slot."""
    target = daily_calories * configuration.fraction_for(slot)
    return CalorieBand.around(target, CALORIE_TOLERANCE)
