"""
Scorer Interface - Abstract base for AI screening providers.

This module defines the interface the pipeline uses to score a document
against a job description (OpenAI, Ollama-compatible servers, etc.).
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.llm.schema_models import AnalysisResult


class Scorer(ABC):
    """
    Abstract Interface for Screening Providers.
    """

    @abstractmethod
    async def score(
        self,
        content: str,
        mime_type: str,
        is_plain_text: bool,
        job_description: str,
        api_key: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Score extracted document content against a job description.

        Args:
            content: Plain text, or base64-encoded bytes when is_plain_text is False
            mime_type: Mime type of the original content
            is_plain_text: Whether content is decoded text
            job_description: Free-text job description
            api_key: Optional per-call credential overriding the configured one

        Raises:
            RateLimitedError: The provider rejected the call for rate/quota reasons (retryable)
            ScoreError: Any other failure (not retryable)
        """
        pass

    async def aclose(self) -> None:
        """Release provider resources. Providers without any keep this no-op."""
        return None
