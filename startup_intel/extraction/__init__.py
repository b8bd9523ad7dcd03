"""Page text extraction and LLM access."""

from .text_extractor import TextExtractor, normalize_text
from .llm_client import LLMClient, ConfigurationError

__all__ = ["TextExtractor", "normalize_text", "LLMClient", "ConfigurationError"]
