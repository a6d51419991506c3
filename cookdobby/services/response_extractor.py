"""Pull the model's JSON object out of a chat-completion response."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

from cookdobby.utils.exceptions import InvalidModelJSON, MalformedProviderResponse

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()

_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def get_completion_text(envelope: Any) -> str:
    """
    Return ``choices[0].message.content`` from a provider envelope.

    Raises:
        MalformedProviderResponse: if the content is missing or not text.
    """
    try:
        content = envelope["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedProviderResponse(
            details="Missing choices[0].message.content",
            raw=_preview(envelope),
        ) from e

    if not isinstance(content, str):
        raise MalformedProviderResponse(
            details="Completion content is not text",
            raw=_preview(envelope),
        )
    return content


def find_trailing_json_object(text: str) -> Dict[str, Any]:
    """
    Find the JSON object that ends the text.

    Candidates start at each ``{`` from left to right; the first one that
    decodes to an object ending exactly at the end of the text wins, so the
    outermost trailing object is returned and braces inside string values
    are handled by the JSON decoder rather than counted.

    Raises:
        ValueError: if no such object exists or nesting is too deep to decode.
    """
    t = _TRAILING_FENCE.sub("", text.rstrip())
    end = len(t)

    start = t.find("{")
    while start != -1:
        try:
            value, stop = _decoder.raw_decode(t, start)
        except json.JSONDecodeError:
            pass
        except RecursionError as e:
            # Too deep to decode; rescanning each nested brace would be quadratic.
            raise ValueError("JSON nested too deeply") from e
        else:
            if stop == end and isinstance(value, dict):
                return value
        start = t.find("{", start + 1)

    raise ValueError("No trailing JSON object found")


def parse_model_json(text: str) -> Dict[str, Any]:
    """
    Parse the completion text as a JSON object, tolerating leading commentary
    and a markdown fence around a trailing object.

    Raises:
        InvalidModelJSON: carrying the raw text.
    """
    stripped = text.strip()
    try:
        value = json.loads(stripped)
    # Nesting deeper than the decoder can recurse counts as unparseable.
    except (json.JSONDecodeError, RecursionError):
        pass
    else:
        if isinstance(value, dict):
            return value

    try:
        value = find_trailing_json_object(stripped)
    except ValueError as e:
        logger.warning(
            "Model returned no parseable JSON object",
            extra={"raw_preview": stripped[:200]},
        )
        raise InvalidModelJSON(raw=text) from e

    logger.info("Recovered trailing JSON object from model commentary")
    return value


def extract_payload(envelope: Any) -> Dict[str, Any]:
    """Completion text from the envelope, parsed to a JSON object."""
    return parse_model_json(get_completion_text(envelope))


def _preview(value: Any, limit: int = 2000) -> str:
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(value)
    return text[:limit]
