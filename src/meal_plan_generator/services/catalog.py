"""In-memory recipe catalog indexed by slot category and calories."""

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from meal_plan_generator.domain.plans import MealSlot
from meal_plan_generator.domain.recipes import Recipe

SEARCH_CATEGORIES = (
    MealSlot.BREAKFAST,
    MealSlot.LUNCH,
    MealSlot.DINNER,
    MealSlot.SNACK,
)

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Source of the recipe catalog."""

    def fetch_recipes(self, excluded_equipment_ids: Iterable[int]) -> list[Recipe]:
        """Return recipes with calories that need none of the excluded equipment."""


@dataclass
class _CalorieBucket:
    recipes: list[Recipe]
    calories: list[float]


class CatalogIndex:
    """Calorie-sorted recipe buckets per searchable slot category.

    Morning and afternoon snacks share the ``snack`` bucket. Every bucket is
    sorted once when the index is built, so range queries are a binary search
    for the lower bound followed by a contiguous slice.
    """

    def __init__(self, recipes: Iterable[Recipe]) -> None:
        grouped: dict[MealSlot, list[Recipe]] = {
            category: [] for category in SEARCH_CATEGORIES
        }
        for recipe in recipes:
            categories = {slot.search_category for slot in recipe.meal_slots}
            for category in categories:
                grouped.setdefault(category, []).append(recipe)

        self._buckets: dict[MealSlot, _CalorieBucket] = {}
        for category, members in grouped.items():
            ordered = sorted(members, key=lambda recipe: recipe.total_calories)
            self._buckets[category] = _CalorieBucket(
                recipes=ordered,
                calories=[recipe.total_calories for recipe in ordered],
            )

    @classmethod
    def load(
        cls,
        repository: CatalogRepository,
        excluded_equipment_ids: Iterable[int] = (),
    ) -> "CatalogIndex":
        """Fetch the catalog once and build the index."""
        excluded = frozenset(excluded_equipment_ids)
        recipes = repository.fetch_recipes(excluded)
        index = cls(recipe for recipe in recipes if not recipe.requires_any(excluded))
        _logger.info(
            "Catalog loaded: recipes=%s excluded_equipment=%s",
            index.recipe_count,
            len(excluded),
        )
        return index

    @property
    def recipe_count(self) -> int:
        """Number of distinct recipes across all buckets."""
        return len(
            {
                recipe.id
                for bucket in self._buckets.values()
                for recipe in bucket.recipes
            }
        )

    def bucket(self, slot: MealSlot) -> list[Recipe]:
        """Return the calorie-sorted recipes searchable for a slot."""
        bucket = self._buckets.get(slot.search_category)
        return list(bucket.recipes) if bucket else []

    def query(
        self, slot: MealSlot, min_calories: float, max_calories: float
    ) -> list[Recipe]:
        """Return recipes for a slot with calories in [min, max], sorted."""
        bucket = self._buckets.get(slot.search_category)
        if bucket is None or min_calories > max_calories:
            return []
        start = bisect_left(bucket.calories, min_calories)
        end = bisect_right(bucket.calories, max_calories, lo=start)
        return bucket.recipes[start:end]
