"""LLM Module - Scorer services and interfaces."""
from core.llm.interfaces import Scorer
from core.llm.openai_service import OpenAIScorer
from core.llm.schema_models import AnalysisResult

__all__ = ['Scorer', 'OpenAIScorer', 'AnalysisResult']
