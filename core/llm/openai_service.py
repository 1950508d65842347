"""
OpenAI Service - Scorer implementation using the OpenAI API.

Sends extracted resume content and a job description to a chat model
using JSON Schema mode and parses the structured verdict.
"""
from typing import Dict, Any, List, Optional
import copy
import json
import logging
import mimetypes
import os

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from core.exceptions import ScoreError, RateLimitedError, MissingCredentialsError
from core.llm.interfaces import Scorer
from core.llm.schema_models import AnalysisResult, ANALYSIS_SCHEMA
from core.llm.system_prompts import SCREENING_SYSTEM_PROMPT, build_screening_user_message

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

def _is_rate_limited(exc: BaseException) -> bool:
    """Return True for rate-limit and quota failures, the only retryable class."""
    if isinstance(exc, openai.RateLimitError):
        return True
    message = str(exc).lower()
    return "429" in message or "quota" in message


def _classify_error(exc: openai.OpenAIError) -> ScoreError:
    if _is_rate_limited(exc):
        return RateLimitedError(str(exc))
    return ScoreError(str(exc))


# ---------------------------------------------------------------------------
# Message building
# ---------------------------------------------------------------------------

def _content_part(content: str, mime_type: str, is_plain_text: bool) -> Dict[str, Any]:
    """Build the user-message part that carries the resume itself."""
    if is_plain_text:
        return {"type": "text", "text": f"RESUME TEXT CONTENT:\n{content}"}

    data_url = f"data:{mime_type};base64,{content}"
    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}

    extension = mimetypes.guess_extension(mime_type) or ""
    return {
        "type": "file",
        "file": {"filename": f"resume{extension}", "file_data": data_url},
    }


def build_messages(
    content: str,
    mime_type: str,
    is_plain_text: bool,
    job_description: str
) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": SCREENING_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": build_screening_user_message(job_description)},
                _content_part(content, mime_type, is_plain_text),
            ],
        },
    ]


class OpenAIScorer(Scorer):
    """
    OpenAI Screening Service.

    Scores resumes using JSON Schema mode. The SDK's internal retries are
    disabled; retrying rate-limited calls is the calling agent's job.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None
    ):
        self.api_key = api_key
        self.base_url = base_url

        self.model_config = model_config or {}
        self.model = self.model_config.get('model', 'gpt-4o-mini')
        self.temperature = self.model_config.get('temperature', 0.0)
        self.request_timeout = self.model_config.get('request_timeout_seconds')

        self._clients: Dict[str, AsyncOpenAI] = {}

    def _resolve_api_key(self, api_key: Optional[str]) -> str:
        effective_key = api_key or self.api_key or os.environ.get("OPENAI_API_KEY")
        if not effective_key:
            raise MissingCredentialsError("No API Key provided.")
        return effective_key

    def _client_for(self, api_key: str) -> AsyncOpenAI:
        """Return a cached client for the given key."""
        client = self._clients.get(api_key)
        if client is None:
            client_kwargs = {'api_key': api_key, 'max_retries': 0}
            if self.base_url:
                client_kwargs['base_url'] = self.base_url
            if self.request_timeout:
                client_kwargs['timeout'] = self.request_timeout
            client = AsyncOpenAI(**client_kwargs)
            self._clients[api_key] = client
        return client

    async def aclose(self) -> None:
        """Close every cached client and its connection pool."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()

    async def score(
        self,
        content: str,
        mime_type: str,
        is_plain_text: bool,
        job_description: str,
        api_key: Optional[str] = None,
    ) -> AnalysisResult:
        """Score one resume against a job description.

        Args:
            content: Plain text, or base64-encoded bytes when is_plain_text is False
            mime_type: Mime type of the original content
            is_plain_text: Whether content is decoded text
            job_description: Free-text job description
            api_key: Optional per-call key; falls back to the configured key, then OPENAI_API_KEY

        Returns:
            AnalysisResult parsed from the model's structured output
        """
        client = self._client_for(self._resolve_api_key(api_key))
        schema_spec = ANALYSIS_SCHEMA

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=build_messages(content, mime_type, is_plain_text, job_description),
                temperature=self.temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_spec["name"],
                        "schema": copy.deepcopy(schema_spec["schema"]),
                        "strict": schema_spec["strict"],
                    },
                },
            )
        except openai.OpenAIError as e:
            raise _classify_error(e) from e

        try:
            text = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            raise ScoreError(f"Malformed response from AI model: {e}") from e

        if not text:
            raise ScoreError("No response text from AI model")

        try:
            result = AnalysisResult.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse screening response: {e}")
            raise ScoreError(f"Invalid response from AI model: {e}") from e

        logger.debug(
            f"Scored {result.candidate_name!r} ({self.model}): "
            f"match={result.match_status} score={result.match_score}"
        )
        return result
