"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol


class LlmGateway(Protocol):
    """Abstract contract for interacting with a large-language model."""

    async def generate(self, prompt: str, response_schema: dict[str, Any]) -> str:
        """Send *prompt* constrained to *response_schema*; return the raw text."""
        ...
