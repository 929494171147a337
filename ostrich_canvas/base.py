"""
Base class and shared utilities for the canvas AI flows.
"""

import json
import logging
import re
from typing import Callable, Dict, List, Optional, Type

import anthropic
from pydantic import BaseModel, ValidationError

from . import config

logger = logging.getLogger(__name__)

DEFAULT_MODEL = config.MODEL
MAX_TOOL_ROUNDS = 5


class FlowError(Exception):
    """An AI flow failed: missing key, API error, or output that doesn't fit its schema."""


def clean_json_string(json_str):
    """
    Clean common JSON formatting issues before parsing:
    - Remove trailing commas before closing brackets
    - Remove comments
    - Strip whitespace
    """
    json_str = re.sub(r'//.*?$', '', json_str, flags=re.MULTILINE)
    json_str = re.sub(r'/\*.*?\*/', '', json_str, flags=re.DOTALL)
    json_str = re.sub(r',(\s*[}\]])', r'\1', json_str)
    json_str = re.sub(r',(\s*,)+', ',', json_str)
    return json_str.strip()


class LLMBaseAgent:
    """Base class for all Claude-powered flows."""

    def __init__(self, model=None, max_tokens=4000, client=None):
        """
        Args:
            model: Claude model to use (defaults to OSTRICH_MODEL)
            max_tokens: Response token cap
            client: A ready anthropic client; built from ANTHROPIC_API_KEY when omitted
        """
        if client is None:
            api_key = config.ANTHROPIC_API_KEY
            if not api_key or api_key == 'your_api_key_here':
                raise FlowError(
                    "ANTHROPIC_API_KEY environment variable not set. "
                    "Get your key at https://console.anthropic.com/settings/keys"
                )
            client = anthropic.Anthropic(api_key=api_key)
        self.client = client
        self.model = model or DEFAULT_MODEL
        self.max_tokens = max_tokens

    def call_api(self, system_prompt, messages, tools=None, return_full_response=False):
        """
        Call Claude API.

        Args:
            system_prompt: System prompt string
            messages: List of {"role": "user"|"assistant", "content": ...} dicts
            tools: Optional tool definitions
            return_full_response: If True, return full response object; otherwise return text

        Returns:
            Response text string, or full response object if return_full_response=True
        """
        kwargs = dict(model=self.model, max_tokens=self.max_tokens, system=system_prompt, messages=messages)
        if tools:
            kwargs['tools'] = tools
        try:
            response = self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise FlowError(f"Claude API error: {e}") from e

        usage = getattr(response, 'usage', None)
        if usage is not None:
            logger.debug("%s: %s in / %s out tokens", self.model, usage.input_tokens, usage.output_tokens)
        if return_full_response:
            return response
        return self.response_text(response)

    @staticmethod
    def response_text(response) -> str:
        return "".join(block.text for block in response.content if getattr(block, 'type', None) == 'text')

    def call_with_tools(self, system_prompt, messages: List[Dict], tools: List[Dict],
                        handlers: Dict[str, Callable[[Dict], Dict]]) -> str:
        """
        Run the tool-use loop until Claude answers in text.

        handlers maps tool name -> function(tool_input) -> JSON-serializable result.
        A handler that raises is reported back to Claude as an error result.
        """
        messages = list(messages)
        for _ in range(MAX_TOOL_ROUNDS):
            response = self.call_api(system_prompt, messages, tools=tools, return_full_response=True)
            if response.stop_reason != 'tool_use':
                return self.response_text(response)

            results = []
            for block in response.content:
                if getattr(block, 'type', None) != 'tool_use':
                    continue
                handler = handlers.get(block.name)
                try:
                    if handler is None:
                        raise ValueError(f"Unknown tool: {block.name}")
                    output = handler(block.input)
                    results.append({"type": "tool_result", "tool_use_id": block.id,
                                    "content": json.dumps(output)})
                    logger.debug("Tool %s -> %s", block.name, output)
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning("Tool %s failed: %s", block.name, e)
                    results.append({"type": "tool_result", "tool_use_id": block.id,
                                    "content": str(e), "is_error": True})

            messages.append({"role": "assistant", "content": response.content})
            messages.append({"role": "user", "content": results})

        raise FlowError(f"No answer after {MAX_TOOL_ROUNDS} tool rounds")

    def parse_json_response(self, response_text):
        """Parse JSON from a response string, with cleaning for common LLM quirks."""
        # Strip markdown code fences if present
        if "```json" in response_text:
            start = response_text.find("```json") + 7
            end = response_text.find("```", start)
            response_text = response_text[start:end].strip()
        elif "```" in response_text:
            start = response_text.find("```") + 3
            end = response_text.find("```", start)
            response_text = response_text[start:end].strip()

        cleaned = clean_json_string(response_text)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise FlowError(f"Failed to parse JSON response: {e}") from e

    def parse_output(self, response_text: str, schema: Type[BaseModel], key: Optional[str] = None):
        """
        Parse the response as JSON and validate it against a pydantic schema.

        key: when the schema describes a single field (e.g. a list), wrap the
             parsed JSON as {key: parsed} before validating.
        """
        parsed = self.parse_json_response(response_text)
        if key is not None and not (isinstance(parsed, dict) and key in parsed):
            parsed = {key: parsed}
        try:
            return schema.model_validate(parsed)
        except ValidationError as e:
            raise FlowError(f"Response does not match {schema.__name__}: {e}") from e
