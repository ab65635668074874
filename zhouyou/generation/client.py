"""
LLM Client - Transport for the content-generation collaborator.

The generator only needs `complete(prompt) -> text`. When a JSON schema is
given, the client asks for structured output and returns it as JSON text.
The Anthropic client is the default; tests substitute their own LLMClient.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import json
import logging

import anthropic

logger = logging.getLogger(__name__)

RECORD_TOOL = "record_trial"


class LLMClient(ABC):
    """Interface for text completion."""

    @abstractmethod
    def complete(self, prompt: str, system: str | None = None, schema: dict | None = None) -> str:
        """Return the model's response for `prompt` (JSON text when `schema` is set)."""
        pass


class AnthropicClient(LLMClient):
    """
    Completion client backed by the Anthropic Messages API.

    A schema is sent as the input schema of a forced tool call, so the reply
    is the tool input rather than free text. Transport errors propagate; the
    generator turns them into a fallback.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        max_tokens: int = 1024,
        client: anthropic.Anthropic | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.client = client or anthropic.Anthropic(api_key=api_key)

    def complete(self, prompt: str, system: str | None = None, schema: dict | None = None) -> str:
        kwargs = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        if schema is not None:
            kwargs["tools"] = [{
                "name": RECORD_TOOL,
                "description": "Record the generated trial.",
                "input_schema": schema,
            }]
            kwargs["tool_choice"] = {"type": "tool", "name": RECORD_TOOL}

        logger.debug("Requesting completion from %s", self.model)
        response = self.client.messages.create(**kwargs)

        for block in response.content:
            if getattr(block, "type", None) == "tool_use":
                return json.dumps(block.input)
        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
