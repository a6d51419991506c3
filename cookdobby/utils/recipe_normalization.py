"""Validation and normalization of model output into landing/recipe payloads."""

import logging
import re
from typing import Any, Dict, List, Optional, Union

from cookdobby.models.recipe import LandingPayload, RecipePayload
from cookdobby.services.prompt_service import MAX_LANDING_SECTIONS
from cookdobby.utils.exceptions import InvalidShape, UnknownMode

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_DIGITS = re.compile(r"^\d+$")


def slugify(text: str) -> str:
    """
    Lower-case, drop anything but ``[a-z0-9]``, whitespace and ``-``, trim,
    and join whitespace runs with ``-``.
    """
    slug = _NON_SLUG_CHARS.sub("", text.lower()).strip()
    return _WHITESPACE_RUN.sub("-", slug)


def recipe_url(title: str) -> str:
    return f"/recipes/{slugify(title)}"


def _text(value: Any) -> str:
    """Trimmed text form of a scalar; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _text_list(values: Any) -> List[str]:
    """Trimmed text entries with empty ones removed, in original order."""
    if values is None:
        return []
    if not isinstance(values, list):
        values = [values]
    return [t for t in (_text(v) for v in values) if t]


def _servings(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str) and _DIGITS.match(value.strip()):
        number = int(value.strip())
        return number if number > 0 else None
    return None


def _time(value: Any) -> Optional[Dict[str, str]]:
    if not isinstance(value, dict):
        return None
    fixed = {}
    for key in ("prep", "cook", "total"):
        text = _text(value.get(key))
        if text:
            fixed[key] = text
    return fixed or None


def normalize_landing(data: Dict[str, Any]) -> LandingPayload:
    """
    Validate and canonicalize a landing payload.

    - ``intro`` must be text and ``sections`` a list of objects.
    - At most ``MAX_LANDING_SECTIONS`` sections are kept, in order.
    - Titles are trimmed and upper-cased, teasers trimmed (default "").
    - A ``url`` not starting with ``/`` is replaced by ``/recipes/<slug>``.
    """
    intro = data.get("intro")
    sections = data.get("sections")
    if not isinstance(intro, str) or not isinstance(sections, list):
        raise InvalidShape("landing", data)

    fixed_sections = []
    for section in sections[:MAX_LANDING_SECTIONS]:
        if not isinstance(section, dict):
            raise InvalidShape("landing", data)

        title = _text(section.get("title")).upper()
        url = section.get("url")
        url = url.strip() if isinstance(url, str) else ""
        if not url.startswith("/"):
            url = recipe_url(title)

        fixed_sections.append({
            "title": title,
            "teaser": _text(section.get("teaser")),
            "url": url,
        })

    if len(sections) > MAX_LANDING_SECTIONS:
        logger.info(
            "Truncated landing sections",
            extra={"received": len(sections), "kept": MAX_LANDING_SECTIONS},
        )

    return LandingPayload(intro=intro.strip(), sections=fixed_sections)


def normalize_recipe(data: Dict[str, Any]) -> RecipePayload:
    """
    Validate and canonicalize a recipe payload.

    - ``title`` must be text; ``ingredients`` and ``steps`` must be lists.
    - Text fields are trimmed; empty entries are dropped from text lists.
    - Group names are trimmed and omitted when empty; non-object groups are dropped.
    - ``used_ingredients`` / ``suggested_additions`` default to empty lists.
    - ``servings`` survives only as a positive integer, ``time`` only with
      at least one non-empty entry.
    """
    title = data.get("title")
    ingredients = data.get("ingredients")
    steps = data.get("steps")
    if not isinstance(title, str) or not isinstance(ingredients, list) or not isinstance(steps, list):
        raise InvalidShape("recipe", data)

    groups = []
    for g in ingredients:
        if not isinstance(g, dict):
            continue
        group: Dict[str, Any] = {"items": _text_list(g.get("items"))}
        name = _text(g.get("group"))
        if name:
            group["group"] = name
        groups.append(group)

    normalized: Dict[str, Any] = {
        "title": title.strip(),
        "ingredients": groups,
        "steps": _text_list(steps),
        "used_ingredients": _text_list(data.get("used_ingredients")),
        "suggested_additions": _text_list(data.get("suggested_additions")),
    }

    servings = _servings(data.get("servings"))
    if servings is not None:
        normalized["servings"] = servings

    time = _time(data.get("time"))
    if time is not None:
        normalized["time"] = time

    intro = _text(data.get("intro"))
    if intro:
        normalized["intro"] = intro

    if data.get("notes") is not None:
        normalized["notes"] = _text_list(data.get("notes"))

    return RecipePayload(**normalized)


def normalize_payload(data: Any) -> Union[LandingPayload, RecipePayload]:
    """
    Dispatch on ``mode`` and return the normalized payload.

    Raises:
        InvalidShape: required fields for the declared mode are missing.
        UnknownMode: ``mode`` is missing or not one of the two tags.
    """
    mode = data.get("mode") if isinstance(data, dict) else None

    if mode == "landing":
        return normalize_landing(data)
    if mode == "recipe":
        return normalize_recipe(data)

    logger.warning("Model returned unknown mode", extra={"mode": repr(mode)[:50]})
    raise UnknownMode(data)
