"""Anthropic-backed CompletionClient (LangChain chat model + JSON output parser)."""

import json
import logging
import os
from collections.abc import Sequence
from typing import Any

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_core.exceptions import OutputParserException
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import JsonOutputParser

from agenda.application.errors import CompletionError
from agenda.application.ports import FewShotExample

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-latest"
DEFAULT_TIMEOUT = 30.0
MAX_TOKENS = 500


def build_messages(
    system_prompt: str, examples: Sequence[FewShotExample], utterance: str
) -> list[BaseMessage]:
    """System prompt, then each example as a user/assistant pair, then the utterance."""
    messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]
    for example_utterance, record in examples:
        messages.append(HumanMessage(content=example_utterance))
        messages.append(AIMessage(content=json.dumps(dict(record), ensure_ascii=False)))
    messages.append(HumanMessage(content=utterance))
    return messages


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class AnthropicCompletionClient:
    """One chat completion per call; no retries. Every failure is a CompletionError."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        chat_model: Any = None,
    ) -> None:
        self._parser = JsonOutputParser()
        self._model = chat_model
        if self._model is None and api_key:
            self._model = ChatAnthropic(
                model=model,
                api_key=api_key,
                temperature=0,
                max_tokens=MAX_TOKENS,
                timeout=timeout,
                max_retries=0,
            )
        if self._model is None:
            logger.warning("Anthropic API key not configured - completions will fail")

    async def complete(
        self,
        system_prompt: str,
        examples: Sequence[FewShotExample],
        utterance: str,
    ) -> dict[str, Any]:
        if self._model is None:
            raise CompletionError("ANTHROPIC_API_KEY is not configured")
        messages = build_messages(system_prompt, examples, utterance)
        try:
            response = await self._model.ainvoke(messages)
        except anthropic.APIError as e:
            raise CompletionError(f"Anthropic request failed: {e}") from e
        text = _message_text(response)
        try:
            record = self._parser.parse(text)
        except OutputParserException as e:
            raise CompletionError(f"Unparseable completion output: {e}") from e
        if not isinstance(record, dict):
            raise CompletionError(
                f"Completion output must be a JSON object, got {type(record).__name__}"
            )
        logger.debug("Completion record: %s", record)
        return record


def build_completion_client() -> AnthropicCompletionClient:
    """Client configured from ANTHROPIC_API_KEY, ANTHROPIC_MODEL and ANTHROPIC_TIMEOUT."""
    api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip() or None
    model = os.environ.get("ANTHROPIC_MODEL", "").strip() or DEFAULT_MODEL
    try:
        timeout = float(os.environ.get("ANTHROPIC_TIMEOUT", "").strip() or DEFAULT_TIMEOUT)
    except ValueError:
        logger.warning("Invalid ANTHROPIC_TIMEOUT; using %s seconds", DEFAULT_TIMEOUT)
        timeout = DEFAULT_TIMEOUT
    return AnthropicCompletionClient(api_key=api_key, model=model, timeout=timeout)
