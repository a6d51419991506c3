"""Shared API dependencies."""

from cookdobby.services.recipe_generator import RecipeGenerator


def get_recipe_generator() -> RecipeGenerator:
    """Get recipe generator service instance."""
    return RecipeGenerator()
