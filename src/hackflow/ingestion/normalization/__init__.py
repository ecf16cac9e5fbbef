"""
Normalization of unstructured announcement text into Hackathon records.

This package provides:
- LLM clients (LangChain based)
- Payload recovery for untrusted LLM output
- HackathonExtractor: prompt construction + record validation
"""

from .extractor import HackathonExtractor, build_post_prompt, build_search_prompt, normalize_payload
from .llm_client import BaseLLMClient, LangChainLLMClient, create_llm_client
from .payload import extract_payload_span, parse_payload, strip_code_fences

__all__ = [
    "HackathonExtractor",
    "build_post_prompt",
    "build_search_prompt",
    "normalize_payload",
    "BaseLLMClient",
    "LangChainLLMClient",
    "create_llm_client",
    "extract_payload_span",
    "parse_payload",
    "strip_code_fences",
]
