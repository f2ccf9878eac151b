"""
Groq API client used by the analysis stages.

Every call returns an LLMResponse: either parsed JSON data or a typed
failure. Callers never see SDK exceptions.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import groq
from groq import Groq


DEFAULT_MODEL = 'llama-3.3-70b-versatile'
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.1

FAILURE_NO_RESULT = 'no_result'
FAILURE_MALFORMED_RESULT = 'malformed_result'
FAILURE_TRANSPORT_ERROR = 'transport_error'

_JSON_BLOCK_RE = re.compile(r'\{[\s\S]*\}')


@dataclass
class LLMResponse:
    """Outcome of a single analysis call."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    failure: Optional[str] = None
    usage: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def failed(cls, failure: str, error: str) -> 'LLMResponse':
        return cls(success=False, failure=failure, error=error)


class LLMClient:
    """Sends a system prompt plus a user message and parses a JSON reply."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE
    ):
        """
        Initialize the client.

        Args:
            api_key: Groq API key; without one every call fails with no_result
            model: Chat completion model name
            max_tokens: Completion token limit
            temperature: Sampling temperature
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = Groq(api_key=api_key) if api_key else None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def call(self, system_prompt: str, user_message: str) -> LLMResponse:
        """
        Run one chat completion and extract its JSON payload.

        Args:
            system_prompt: Fixed instruction context of the stage
            user_message: Free-text payload

        Returns:
            LLMResponse with parsed data on success, a failure kind otherwise
        """
        if not self.client:
            self.logger.warning("GROQ_API_KEY not configured. Skipping analysis call.")
            return LLMResponse.failed(FAILURE_NO_RESULT, 'Groq client not configured')

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except groq.APIError as e:
            self.logger.error(f"Groq API call failed: {e}")
            return LLMResponse.failed(FAILURE_TRANSPORT_ERROR, str(e))

        if not response.choices or not response.choices[0].message.content:
            return LLMResponse.failed(FAILURE_NO_RESULT, 'No text content in response')

        result = self.parse_response(response.choices[0].message.content)
        if result.success and response.usage is not None:
            result.usage = {
                'input_tokens': response.usage.prompt_tokens,
                'output_tokens': response.usage.completion_tokens,
            }
        return result

    def parse_response(self, response_text: str) -> LLMResponse:
        """Parse the first JSON object embedded in free text."""
        json_match = _JSON_BLOCK_RE.search(response_text)
        if not json_match:
            return LLMResponse.failed(FAILURE_MALFORMED_RESULT, 'No JSON found in response')

        try:
            data = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            self.logger.warning(f"Failed to parse JSON response: {e}")
            return LLMResponse.failed(FAILURE_MALFORMED_RESULT, f'Invalid JSON: {e}')

        if not isinstance(data, dict):
            return LLMResponse.failed(FAILURE_MALFORMED_RESULT, 'Response JSON is not an object')

        return LLMResponse(success=True, data=data)
