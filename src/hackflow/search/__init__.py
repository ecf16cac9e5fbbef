"""
Ad-hoc web search for HackFlow.

- SearchProvider / TavilySearchClient: web-search collaborators
- AdhocSearchPipeline: search + batch extraction, no persistence
"""

from .pipeline import AdhocSearchPipeline, build_web_context
from .tavily import SearchProvider, TavilySearchClient

__all__ = ["AdhocSearchPipeline", "build_web_context", "SearchProvider", "TavilySearchClient"]
