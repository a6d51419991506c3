"""Recipe generation endpoint."""

import json
import logging
from typing import Any, Dict

import pydantic
from fastapi import APIRouter, Depends, Request

from cookdobby.api.dependencies import get_recipe_generator
from cookdobby.middleware.rate_limit import rate_limit_dependency
from cookdobby.models.recipe import GeneratedPayload, GenerateRequest
from cookdobby.services.recipe_generator import RecipeGenerator
from cookdobby.utils.exceptions import BadRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["recipe"])

INVALID_OPTIONS = "Invalid request options"


async def parse_generate_request(request: Request) -> GenerateRequest:
    """
    Read the JSON body leniently so bad input is a 400 rather than a 422.
    A body that is not an object, or whose ``prompt`` is not non-blank text,
    is a missing prompt; a bad ``modelId`` or ``strict`` is reported on its own.
    """
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest(details="Request body must be JSON") from e

    if not isinstance(body, dict):
        raise BadRequest(details="Request body must be a JSON object")

    prompt = body.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise BadRequest()

    try:
        return GenerateRequest.model_validate(body)
    except pydantic.ValidationError as e:
        raise BadRequest(
            INVALID_OPTIONS,
            details="; ".join(f"{err['loc'][0]}: {err['msg']}" for err in e.errors() if err["loc"]),
        ) from e


@router.post(
    "/recipe",
    response_model=GeneratedPayload,
    response_model_exclude_none=True,
)
async def generate_recipe(
    request: Request,
    _: None = Depends(rate_limit_dependency),
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> Dict[str, Any]:
    """
    Generate recipe ideas ("landing") or one detailed recipe ("recipe").

    - **prompt**: Free-text request, e.g. "Give me three quick pasta ideas"
    - **modelId**: Optional provider model overriding the configured default
    - **strict**: Only use the listed ingredients plus pantry staples
    """
    generate_request = await parse_generate_request(request)

    logger.info(
        "Route /api/recipe called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/api/recipe",
            "params": {
                "prompt": (generate_request.prompt or "")[:200],
                "modelId": generate_request.modelId,
                "strict": generate_request.strict,
            },
        },
    )

    payload = await recipe_generator.generate(
        generate_request.prompt,
        model_id=generate_request.modelId,
        strict=bool(generate_request.strict),
    )
    return payload.model_dump(exclude_none=True)
