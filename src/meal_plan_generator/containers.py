"""Dependency container wiring for the application."""

import random
from dataclasses import dataclass

from supabase import create_client

from meal_plan_generator.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from meal_plan_generator.adapters.supabase_planned_meal_repository import (
    SupabasePlannedMealRepository,
)
from meal_plan_generator.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_plan_generator.app_logging import configure_logging
from meal_plan_generator.config import Settings
from meal_plan_generator.services.generator import MealPlanGenerator
from meal_plan_generator.services.meal_plans import MealPlanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_plan_generator: MealPlanGenerator
    meal_plan_service: MealPlanService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    planned_meal_repository = SupabasePlannedMealRepository(supabase_client)
    generator = MealPlanGenerator(
        catalog_repository=catalog_repository,
        rng=random.Random(resolved_settings.random_seed),
        max_optimization_passes=resolved_settings.max_optimization_passes,
        debug=resolved_settings.debug,
    )
    meal_plan_service = MealPlanService(
        profile_repository=profile_repository,
        planned_meal_repository=planned_meal_repository,
        generator=generator,
        horizon_days=resolved_settings.plan_horizon_days,
    )
    return AppContainer(
        settings=resolved_settings,
        meal_plan_generator=generator,
        meal_plan_service=meal_plan_service,
    )
