"""LLM integration used by the spam classifier."""

from smartconnect.llm.client import LLMClient, LLMResponse

__all__ = ["LLMClient", "LLMResponse"]
