import yaml
import os
import logging
from typing import List, Optional
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_AGENT_NAMES = ["Agent Alpha", "Agent Beta", "Agent Gamma", "Agent Delta", "Agent Epsilon"]


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.0  # 0.0 = deterministic scoring
    request_timeout_seconds: Optional[float] = None


class ScreeningConfig(BaseModel):
    """
    Configuration for the agent pool that screens a batch of documents.
    """
    worker_count: int = Field(default=5, gt=0)
    agent_names: List[str] = Field(default_factory=lambda: list(DEFAULT_AGENT_NAMES))

    # Fixed wait before every scorer call, per agent
    pacing_seconds: float = 1.0

    # Rate-limited calls are retried max_retries times after the first attempt,
    # waiting backoff_base_seconds, then doubling (2s -> 4s -> 8s)
    max_retries: int = 3
    backoff_base_seconds: float = 2.0

    # Upper bound for a single scorer call; None disables it
    score_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    def agent_name(self, index: int) -> str:
        if index < len(self.agent_names):
            return self.agent_names[index]
        return f"Agent {index + 1}"


class ExtractionConfig(BaseModel):
    # Reduce PDFs to text locally instead of sending the binary to the scorer
    pdf_text_extraction: bool = False
    default_mime_type: str = "application/pdf"


class AppConfig(BaseModel):
    llm: LlmConfig = Field(default_factory=LlmConfig)
    screening: ScreeningConfig = Field(default_factory=ScreeningConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another dir), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", os.path.basename(config_path))

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    # Allow env var override for LLM Base URL
    env_llm_base_url = os.environ.get("SCREENER_LLM_BASE_URL")
    if env_llm_base_url:
        data.setdefault('llm', {})
        data['llm']['base_url'] = env_llm_base_url

    # Allow env var override for LLM API key
    env_llm_api_key = os.environ.get("SCREENER_LLM_API_KEY")
    if env_llm_api_key:
        data.setdefault('llm', {})
        data['llm']['api_key'] = env_llm_api_key

    # Allow env var override for the size of the agent pool
    env_worker_count = os.environ.get("SCREENER_WORKER_COUNT")
    if env_worker_count:
        data.setdefault('screening', {})
        data['screening']['worker_count'] = int(env_worker_count)

    return AppConfig(**data)
