from dataclasses import dataclass

from core.config_loader import AppConfig, LlmConfig, ExtractionConfig
from core.llm.openai_service import OpenAIScorer
from etl.extractor import DocumentExtractor
from pipeline.coordinator import BatchCoordinator


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Provides a single source of truth for service instantiation so the CLI
    and tests build the pipeline the same way.
    """
    config: AppConfig
    scorer: OpenAIScorer
    extractor: DocumentExtractor
    coordinator: BatchCoordinator

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        scorer = cls._build_scorer(config.llm)
        extractor = cls._build_extractor(config.extraction)
        coordinator = BatchCoordinator(extractor, scorer, config.screening)

        return cls(
            config=config,
            scorer=scorer,
            extractor=extractor,
            coordinator=coordinator,
        )

    @staticmethod
    def _build_scorer(llm_config: LlmConfig) -> OpenAIScorer:
        """Build OpenAI scorer from LLM configuration."""
        model_config = {
            'model': llm_config.model,
            'temperature': llm_config.temperature,
            'request_timeout_seconds': llm_config.request_timeout_seconds,
        }

        return OpenAIScorer(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
        )

    @staticmethod
    def _build_extractor(extraction_config: ExtractionConfig) -> DocumentExtractor:
        return DocumentExtractor(
            pdf_text_extraction=extraction_config.pdf_text_extraction,
            default_mime_type=extraction_config.default_mime_type,
        )
