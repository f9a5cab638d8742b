from __future__ import annotations
from dataclasses import dataclass

import anthropic

from jobboard.core.config import settings
from jobboard.core.errors import ModelNotConfigured


@dataclass
class ToolCallResult:
    tool_input: dict | None
    text: str
    stop_reason: str | None
    model: str = ""


class LLMClient:
    """Thin wrapper over the Anthropic Messages API that always forces a single named tool."""

    def __init__(self, api_key: str | None = None, client: anthropic.Anthropic | None = None):
        self._api_key = api_key if api_key is not None else settings.anthropic_api_key
        self._client = client

    @property
    def client(self) -> anthropic.Anthropic:
        # Lazily built so importing the app never needs a key.
        if self._client is None:
            if not self._api_key:
                raise ModelNotConfigured("ANTHROPIC_API_KEY is not configured")
            self._client = anthropic.Anthropic(api_key=self._api_key)
        return self._client

    def call_tool(self, *, model: str, system: str, user: str, tool: dict, max_tokens: int) -> ToolCallResult:
        response = self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system,
            tools=[tool],
            tool_choice={"type": "tool", "name": tool["name"]},
            messages=[{"role": "user", "content": user}],
        )

        tool_input = None
        text_parts: list[str] = []
        for block in response.content:
            if block.type == "tool_use" and block.name == tool["name"]:
                tool_input = block.input if isinstance(block.input, dict) else None
            elif block.type == "text":
                text_parts.append(block.text)

        return ToolCallResult(
            tool_input=tool_input,
            text="\n".join(text_parts),
            stop_reason=response.stop_reason,
            model=model,
        )
