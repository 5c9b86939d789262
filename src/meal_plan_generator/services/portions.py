"""Portion arithmetic shared by recipe selection and day optimization."""

import math
from collections.abc import Iterable

from meal_plan_generator.domain.nutrition import ZERO_MACROS, MacroProfile
from meal_plan_generator.domain.plans import IngredientOverride, MealAssignment
from meal_plan_generator.domain.recipes import Recipe, RecipeIngredient

INGREDIENT_ROUNDING_STEP = 5


def round_ingredient_amount(amount: float) -> float:
    """Round an amount to the nearest multiple of the rounding step.

    Halves round up, e.g. 181.8 -> 180, 48.2 -> 50, 222.5 -> 225.
    """
    steps = math.floor(amount / INGREDIENT_ROUNDING_STEP + 0.5)
    return float(steps * INGREDIENT_ROUNDING_STEP)


def round_within(amount: float, lower: float, upper: float) -> float:
    """Round an amount, keeping the result inside [lower, upper].

    Small ingredients can round out of their allowed range; those keep the
    unrounded amount clamped to the range instead.
    """
    rounded = round_ingredient_amount(amount)
    if lower <= rounded <= upper:
        return rounded
    return min(max(amount, lower), upper)


def effective_amount(
    ingredient: RecipeIngredient,
    overrides: Iterable[IngredientOverride] | None,
) -> float:
    """Return the ingredient amount after applying any override."""
    for override in overrides or ():
        if override.ingredient_id == ingredient.ingredient_id:
            return override.new_amount
    return ingredient.base_amount


def recipe_macros(
    recipe: Recipe, overrides: Iterable[IngredientOverride] | None = None
) -> MacroProfile:
    """Compute recipe nutrition with ingredient overrides applied."""
    if not recipe.ingredients:
        return MacroProfile(
            calories=recipe.total_calories,
            protein_g=recipe.total_protein_g,
            fat_g=recipe.total_fat_g,
            carbs_g=recipe.total_carbs_g,
        )

    override_list = list(overrides or ())
    calories = protein = fat = carbs = 0.0
    for ingredient in recipe.ingredients:
        if ingredient.base_amount == 0:
            continue
        scale = effective_amount(ingredient, override_list) / ingredient.base_amount
        calories += ingredient.calories * scale
        protein += ingredient.protein_g * scale
        fat += ingredient.fat_g * scale
        carbs += ingredient.carbs_g * scale

    return MacroProfile(
        calories=float(math.floor(calories + 0.5)),
        protein_g=math.floor(protein * 10 + 0.5) / 10,
        fat_g=math.floor(fat * 10 + 0.5) / 10,
        carbs_g=math.floor(carbs * 10 + 0.5) / 10,
    )


def day_totals(assignments: Iterable[MealAssignment]) -> MacroProfile:
    """Sum nutrition over a day's assignments."""
    total = ZERO_MACROS
    for assignment in assignments:
        total = total + recipe_macros(
            assignment.recipe, assignment.ingredient_overrides
        )
    return total
