"""Payload models returned by the generate endpoint."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LandingSection(BaseModel):
    """One recipe idea on a landing page."""

    title: str = Field(..., description="Upper-cased idea title")
    teaser: str = Field("", description="1-3 sentence teaser")
    url: str = Field(..., description="Site-relative link, e.g. /recipes/miso-ramen")


class LandingPayload(BaseModel):
    """A list of recipe ideas."""

    mode: Literal["landing"] = "landing"
    intro: str = Field(..., description="2-4 inviting sentences")
    sections: List[LandingSection] = Field(default_factory=list, max_length=8)


class RecipeTime(BaseModel):
    """Free-text preparation, cooking and total durations."""

    prep: Optional[str] = None
    cook: Optional[str] = None
    total: Optional[str] = None


class IngredientGroup(BaseModel):
    """Group of ingredients (e.g., 'For the sauce')."""

    group: Optional[str] = Field(None, description="Group name, omitted when absent")
    items: List[str] = Field(default_factory=list, description="Ingredient lines")


class RecipePayload(BaseModel):
    """A single fully detailed recipe."""

    mode: Literal["recipe"] = "recipe"
    title: str
    servings: Optional[int] = Field(None, gt=0)
    time: Optional[RecipeTime] = None
    intro: Optional[str] = None
    ingredients: List[IngredientGroup] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list, description="Imperative instructions, in order")
    notes: Optional[List[str]] = None
    used_ingredients: List[str] = Field(default_factory=list)
    suggested_additions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "mode": "recipe",
                "title": "Spicy tuna roll",
                "servings": 2,
                "time": {"prep": "20 min", "cook": "25 min", "total": "45 min"},
                "ingredients": [
                    {"group": "Rice", "items": ["1 cup sushi rice", "2 tbsp rice vinegar"]},
                    {"items": ["150 g sushi-grade tuna", "1 tbsp sriracha", "2 nori sheets"]},
                ],
                "steps": [
                    "Rinse the rice until the water runs clear, then cook it.",
                    "Season the warm rice with the vinegar and let it cool.",
                    "Mix the tuna with the sriracha.",
                    "Spread rice on the nori, add the tuna and roll tightly.",
                ],
                "used_ingredients": ["tuna", "rice"],
                "suggested_additions": ["cucumber"],
            }
        }
    )


GeneratedPayload = Annotated[
    Union[LandingPayload, RecipePayload],
    Field(discriminator="mode"),
]


class GenerateRequest(BaseModel):
    """Request body for the generate endpoint."""

    prompt: Optional[str] = None
    modelId: Optional[str] = None
    strict: Optional[bool] = Field(False, description="null is treated as false")
