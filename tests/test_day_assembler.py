"""Tests for drafting single day plans."""

import random
from datetime import date

import pytest

from meal_plan_generator.domain.errors import CatalogGapError
from meal_plan_generator.domain.nutrition import NutritionTargets
from meal_plan_generator.domain.plans import (
    IngredientOverride,
    MealSlot,
    PlanConfiguration,
    PlanType,
)
from meal_plan_generator.services.assembler import DayAssembler
from meal_plan_generator.services.batch import BatchAllocator, BatchReservation
from meal_plan_generator.services.catalog import CatalogIndex
from meal_plan_generator.services.generator import generate_dates
from meal_plan_generator.services.plan_config import PLAN_CONFIGURATIONS
from meal_plan_generator.services.selector import RecipeSelector
from tests.conftest import make_recipe, three_main_catalog

DATES = generate_dates(date(2024, 3, 4), 7)
LUNCH_ONLY = PlanConfiguration(
    plan_type=PlanType.THREE_MAIN,
    slots=(MealSlot.LUNCH,),
    calorie_fractions={MealSlot.LUNCH: 1.0},
)


def _assembler(
    recipes, configuration: PlanConfiguration, calories: float = 1800
) -> DayAssembler:
    return DayAssembler(
        selector=RecipeSelector(index=CatalogIndex(recipes), rng=random.Random(3)),
        configuration=configuration,
        targets=NutritionTargets(
            calories=calories, protein_g=100, fat_g=60, carbs_g=200
        ),
    )


def test_assembles_every_slot_in_order() -> None:
    assembler = _assembler(
        three_main_catalog(), PLAN_CONFIGURATIONS[PlanType.THREE_MAIN]
    )

    day = assembler.assemble(DATES, 0, BatchAllocator())

    assert day.meal_date == DATES[0]
    assert [assignment.slot for assignment in day.assignments] == [
        MealSlot.BREAKFAST,
        MealSlot.LUNCH,
        MealSlot.DINNER,
    ]
    assert all(assignment.meal_date == DATES[0] for assignment in day.assignments)


def test_lunch_and_dinner_get_different_recipes() -> None:
    assembler = _assembler(
        three_main_catalog(), PLAN_CONFIGURATIONS[PlanType.THREE_MAIN]
    )

    for day_index in range(len(DATES)):
        day = assembler.assemble(DATES, day_index, BatchAllocator())
        lunch, dinner = day.assignments[1], day.assignments[2]
        assert lunch.recipe_id != dinner.recipe_id


def test_missing_slot_raises_catalog_gap() -> None:
    recipes = [make_recipe(1, 600, slots=(MealSlot.LUNCH, MealSlot.DINNER))]
    assembler = _assembler(recipes, PLAN_CONFIGURATIONS[PlanType.THREE_MAIN])

    with pytest.raises(CatalogGapError) as exc_info:
        assembler.assemble(DATES, 0, BatchAllocator())

    assert exc_info.value.slot is MealSlot.BREAKFAST
    assert str(exc_info.value) == (
        "No recipe found for breakfast on 2024-03-04: "
        "tried 459-621 kcal and extended range 270-810 kcal"
    )


def test_reservation_is_used_without_selection() -> None:
    soup = make_recipe(1, 600, base_servings=2, is_batch_friendly=True)
    override = IngredientOverride(ingredient_id=100, new_amount=90)
    allocator = BatchAllocator(
        reservations={
            (DATES[1], MealSlot.LUNCH): BatchReservation(
                recipe=soup,
                ingredient_overrides=(override,),
                remaining_servings=1,
            )
        }
    )
    assembler = _assembler([], LUNCH_ONLY, calories=600)

    day = assembler.assemble(DATES, 1, allocator)

    (assignment,) = day.assignments
    assert assignment.recipe_id == 1
    assert assignment.ingredient_overrides == [override]
    assert len(allocator) == 0


def test_batch_recipe_repeats_on_following_days() -> None:
    soup = make_recipe(1, 600, base_servings=3, is_batch_friendly=True)
    assembler = _assembler([soup], LUNCH_ONLY, calories=600)
    allocator = BatchAllocator()

    first = assembler.assemble(DATES, 0, allocator)

    assert first.assignments[0].recipe_id == 1
    assert set(allocator.reservations) == {
        (DATES[1], MealSlot.LUNCH),
        (DATES[2], MealSlot.LUNCH),
    }

    # Later days are served from the reservations even with an empty catalog.
    leftovers = _assembler([], LUNCH_ONLY, calories=600)
    days = [leftovers.assemble(DATES, day_index, allocator) for day_index in (1, 2)]

    assert [day.assignments[0].recipe_id for day in days] == [1, 1]
    assert len(allocator) == 0


def test_reserved_overrides_are_copied_per_day() -> None:
    soup = make_recipe(1, 600, base_servings=3, is_batch_friendly=True)
    override = IngredientOverride(ingredient_id=100, new_amount=90)
    allocator = BatchAllocator()
    allocator.reserve(MealSlot.LUNCH, soup, [override], 0, DATES)
    assembler = _assembler([], LUNCH_ONLY, calories=600)

    first = assembler.assemble(DATES, 1, allocator)
    second = assembler.assemble(DATES, 2, allocator)
    first.assignments[0].replace_override(
        IngredientOverride(ingredient_id=100, new_amount=70)
    )

    assert second.assignments[0].ingredient_overrides == [override]
