"""
Pydantic models for the screening analysis returned by the scorer.

This module provides:
1. The structured output model the LLM must fill in
2. Runtime JSON schema generation for OpenAI structured output
3. The local AnalysisResult, which also represents failed documents

The response schema follows OpenAI's structured output requirements with strict validation.
"""
from typing import List
from pydantic import BaseModel, Field, ConfigDict


class ScreeningResponse(BaseModel):
    """Evidence-based verdict for one resume against one job description."""
    model_config = ConfigDict(extra='forbid')

    candidate_name: str = Field(description="Full name of the candidate extracted from the resume")
    match_status: bool = Field(
        description="True ONLY if ALL mandatory skills/degrees are present."
    )
    match_score: int = Field(
        description="0-49 if mandatory missing. 70 if all mandatory present. 71-100 based on optional skills."
    )
    reason: str = Field(
        description="Specific justification. If rejected, state exactly which mandatory skill was missing."
    )
    mandatory_skills_found: List[str] = Field(description="Mandatory requirements found in the resume")
    mandatory_skills_missing: List[str] = Field(description="Mandatory requirements absent from the resume")
    optional_skills_found: List[str] = Field(description="Optional requirements found in the resume")
    is_ai_generated: bool = Field(
        description="True if the resume text exhibits patterns strongly characteristic of AI generation."
    )
    ai_generation_reasoning: str = Field(
        description="Brief explanation of why the text looks AI-generated or human-written."
    )


class AnalysisResult(ScreeningResponse):
    """Outcome recorded on a work item.

    ``is_error`` is never produced by the model; it marks results synthesized
    locally when extraction or scoring failed.
    """
    model_config = ConfigDict(extra='ignore')

    is_error: bool = False

    @property
    def is_positive(self) -> bool:
        """The candidate met every mandatory requirement."""
        return self.match_status and not self.is_error

    @classmethod
    def error(cls, message: str, kind: str = "API") -> "AnalysisResult":
        """Build the fallback result for a document that could not be scored."""
        message = (message or "").rstrip(".") or "Unknown error"
        return cls(
            candidate_name="Error Processing File",
            match_status=False,
            match_score=0,
            reason=f"{kind} Error: {message}.",
            mandatory_skills_found=[],
            mandatory_skills_missing=[],
            optional_skills_found=[],
            is_ai_generated=False,
            ai_generation_reasoning="Processing failed.",
            is_error=True,
        )


def _strict_schema(model: type[BaseModel]) -> dict:
    schema = model.model_json_schema()
    # Strict mode requires every property to be listed as required
    schema["required"] = list(schema["properties"].keys())
    schema["additionalProperties"] = False
    return schema


ANALYSIS_SCHEMA = {
    "name": "resume_screening_schema",
    "strict": True,
    "schema": _strict_schema(ScreeningResponse),
}
