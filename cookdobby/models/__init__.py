"""Pydantic models."""

from cookdobby.models.recipe import (
    GeneratedPayload,
    GenerateRequest,
    IngredientGroup,
    LandingPayload,
    LandingSection,
    RecipePayload,
    RecipeTime,
)

__all__ = [
    "GeneratedPayload",
    "GenerateRequest",
    "IngredientGroup",
    "LandingPayload",
    "LandingSection",
    "RecipePayload",
    "RecipeTime",
]
