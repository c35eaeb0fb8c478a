"""External analyzer: notice extraction, strategy and letter drafting."""

from pcnwizard.analyzer.base import Analyzer
from pcnwizard.analyzer.llm_analyzer import LLMAnalyzer, clean_json

__all__ = ["Analyzer", "LLMAnalyzer", "clean_json"]
