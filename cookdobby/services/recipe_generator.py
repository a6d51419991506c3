"""Recipe generation: prompt -> provider call -> extraction -> normalization."""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, Optional, Union

from cookdobby.config import Settings, settings as default_settings
from cookdobby.models.recipe import LandingPayload, RecipePayload
from cookdobby.services.prompt_service import build_messages
from cookdobby.services.response_extractor import extract_payload
from cookdobby.services.transport import RetryingTransport
from cookdobby.utils.exceptions import (
    BadRequest,
    ConfigurationError,
    CookDobbyException,
    MalformedProviderResponse,
    ProviderError,
)
from cookdobby.utils.recipe_normalization import normalize_payload

logger = logging.getLogger(__name__)

NormalizedPayload = Union[LandingPayload, RecipePayload]


class Stage(str, enum.Enum):
    """Where a generate call is; failures are logged with the stage they hit."""

    IDLE = "idle"
    BUILDING_PROMPT = "building_prompt"
    AWAITING_PROVIDER = "awaiting_provider"
    EXTRACTING_RESPONSE = "extracting_response"
    VALIDATING = "validating"
    DONE = "done"


class RecipeGenerator:
    """Turns a free-text prompt into a normalized landing or recipe payload."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[RetryingTransport] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.transport = transport or RetryingTransport(
            max_attempts=self.settings.retry_max_attempts,
            base_delay=self.settings.retry_base_delay_ms / 1000.0,
            timeout=self.settings.http_timeout,
        )

    def resolve_model(self, model_id: Optional[str] = None) -> str:
        if model_id and model_id.strip():
            return model_id.strip()
        return self.settings.fireworks_model

    def build_request_body(self, prompt: str, model: str, strict: bool) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": build_messages(prompt, strict),
            "temperature": self.settings.chat_temperature,
            "response_format": {"type": "json_object"},
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.fireworks_api_key}",
        }

    async def generate(
        self,
        prompt: Any,
        model_id: Optional[str] = None,
        strict: bool = False,
    ) -> NormalizedPayload:
        """
        Generate a landing or recipe payload for ``prompt``.

        Args:
            prompt: Caller's free-text request
            model_id: Optional provider model overriding the configured default
            strict: Forbid ingredients beyond the caller's list and pantry staples

        Returns:
            The normalized payload

        Raises:
            CookDobbyException: one of its subclasses, per failure kind
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise BadRequest()

        if not self.settings.provider_configured:
            logger.error("FIREWORKS_API_KEY is not configured")
            raise ConfigurationError()

        stage = Stage.IDLE
        model = self.resolve_model(model_id)
        log_extra = {"model": model, "strict": bool(strict), "prompt": prompt[:200]}

        try:
            stage = Stage.BUILDING_PROMPT
            body = self.build_request_body(prompt, model, bool(strict))

            stage = Stage.AWAITING_PROVIDER
            logger.info("Requesting completion from provider", extra=log_extra)
            response = await self.transport.post_json(
                self.settings.chat_completions_url,
                headers=self._headers(),
                payload=body,
            )
            if not response.is_success:
                logger.error(
                    f"Provider returned HTTP {response.status_code}",
                    extra={**log_extra, "status_code": response.status_code},
                )
                raise ProviderError(response.status_code, response.text)

            stage = Stage.EXTRACTING_RESPONSE
            try:
                envelope = response.json()
            except ValueError as e:
                raise MalformedProviderResponse(
                    details="Provider body is not JSON", raw=response.text
                ) from e
            data = extract_payload(envelope)

            stage = Stage.VALIDATING
            payload = normalize_payload(data)

        except CookDobbyException as e:
            logger.warning(
                f"Recipe generation failed while {stage.value}: {e.error}",
                extra={**log_extra, "stage": stage.value, "failure": type(e).__name__},
            )
            raise

        stage = Stage.DONE
        logger.info(
            f"Generated {payload.mode} payload",
            extra={**log_extra, "stage": stage.value, "mode": payload.mode},
        )
        return payload
