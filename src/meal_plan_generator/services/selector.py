"""Recipe selection for a single meal slot."""

import random
from collections.abc import Collection
from dataclasses import dataclass, field

from meal_plan_generator.domain.plans import CalorieBand, IngredientOverride, MealSlot
from meal_plan_generator.domain.recipes import Recipe
from meal_plan_generator.services.catalog import CatalogIndex
from meal_plan_generator.services.portions import round_within

EXTENDED_CALORIE_TOLERANCE = 0.5
MAX_INGREDIENT_CHANGE = 0.2
SCALING_SKIP_TOLERANCE = 0.05
MIN_SCALE_DELTA = 0.01
MIN_SCALABLE_CALORIE_SHARE = 0.2


@dataclass(frozen=True)
class RecipeSelection:
    """Selected recipe with optional calorie-scaling overrides."""

    recipe: Recipe
    ingredient_overrides: list[IngredientOverride] | None = None


@dataclass
class RecipeSelector:
    """Pick recipes from the catalog index for slot calorie bands.

    Standard-band picks are random for variety. When the standard band is
    empty, the extended band is searched deterministically for the recipe
    closest to the target, which is then scaled toward it.
    """

    index: CatalogIndex
    rng: random.Random = field(default_factory=random.Random)

    def select(
        self,
        slot: MealSlot,
        band: CalorieBand,
        used_recipe_ids: Collection[int] = (),
    ) -> RecipeSelection | None:
        """Return a recipe for the slot, or None if the catalog has a gap."""
        standard = _prefer_unused(
            self.index.query(slot, band.min_calories, band.max_calories),
            used_recipe_ids,
        )
        if standard:
            return RecipeSelection(recipe=self.rng.choice(standard))

        extended_band = extended_band_for(band)
        extended = _prefer_unused(
            self.index.query(
                slot, extended_band.min_calories, extended_band.max_calories
            ),
            used_recipe_ids,
        )
        if not extended:
            return None

        closest = min(
            extended, key=lambda recipe: abs(recipe.total_calories - band.target)
        )
        return RecipeSelection(
            recipe=closest,
            ingredient_overrides=calorie_scaling_overrides(closest, band.target),
        )


def extended_band_for(band: CalorieBand) -> CalorieBand:
    """Return the fallback band around the same target."""
    return CalorieBand.around(band.target, EXTENDED_CALORIE_TOLERANCE)


def calorie_scaling_overrides(
    recipe: Recipe, target_calories: float
) -> list[IngredientOverride] | None:
    """Scale scalable ingredients so the recipe moves toward a calorie target.

    Each ingredient changes by at most 20%. Recipes already within 5% of the
    target, or whose scalable ingredients carry under 20% of the calories,
    are left as they are.
    """
    current = recipe.total_calories
    if current <= 0:
        return None
    lower_ok = target_calories * (1 - SCALING_SKIP_TOLERANCE)
    upper_ok = target_calories * (1 + SCALING_SKIP_TOLERANCE)
    if lower_ok <= current <= upper_ok:
        return None

    scale = max(
        1 - MAX_INGREDIENT_CHANGE,
        min(1 + MAX_INGREDIENT_CHANGE, target_calories / current),
    )
    if abs(scale - 1) < MIN_SCALE_DELTA:
        return None

    scalable = [
        ingredient
        for ingredient in recipe.ingredients
        if ingredient.is_scalable and ingredient.calories > 0
    ]
    if not scalable:
        return None
    scalable_calories = sum(ingredient.calories for ingredient in scalable)
    if scalable_calories < current * MIN_SCALABLE_CALORIE_SHARE:
        return None

    overrides: list[IngredientOverride] = []
    for ingredient in scalable:
        base = ingredient.base_amount
        new_amount = round_within(
            base * scale, min(base, base * scale), max(base, base * scale)
        )
        if new_amount != base:
            overrides.append(
                IngredientOverride(
                    ingredient_id=ingredient.ingredient_id,
                    new_amount=new_amount,
                    auto_adjusted=True,
                )
            )
    return overrides or None


def _prefer_unused(
    recipes: list[Recipe], used_recipe_ids: Collection[int]
) -> list[Recipe]:
    unused = [recipe for recipe in recipes if recipe.id not in used_recipe_ids]
    return unused or recipes
