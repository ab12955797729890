"""OpenAI adapter — implements the LlmGateway port."""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI, AuthenticationError, RateLimitError

from code_reviewer.domain.exceptions import ModelError

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by the OpenAI chat-completions API.

    Structured output is requested through ``response_format`` with a JSON
    schema.  The SDK's own retry loop is disabled: failures surface to the
    caller on the first attempt.
    """

    def __init__(self, api_key: str, model: str = "gpt-4o-mini") -> None:
        self._client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self._model = model

    async def generate(self, prompt: str, response_schema: dict[str, Any]) -> str:
        """Send *prompt* and return the completion text."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "code_review",
                        "schema": response_schema,
                    },
                },
            )

            content = response.choices[0].message.content

            if not content:
                raise ModelError("Model returned an empty response.")

            return content

        except AuthenticationError as exc:
            raise ModelError(
                "Invalid OpenAI API key. "
                "Set a valid key in the OPENAI_API_KEY environment variable."
            ) from exc

        except RateLimitError as exc:
            detail = str(exc)
            logger.error("OpenAI RateLimitError: %s", detail)
            raise ModelError(f"OpenAI rate limit / quota error: {detail}") from exc

        except ModelError:
            raise

        except Exception as exc:
            raise ModelError(f"Model call failed: {exc}") from exc

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
