"""
Tavily web-search client.

Returns the text snippets of the top results for a query. Used only by
the ad-hoc search pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from tavily import TavilyClient

from hackflow.ingestion.errors import SearchError

logger = logging.getLogger(__name__)


class SearchProvider(ABC):
    """Web-search provider returning plain-text snippets."""

    @abstractmethod
    def search(self, query: str, *, max_results: int = 5, search_depth: str = "advanced") -> List[str]:
        ...


class TavilySearchClient(SearchProvider):
    """Search provider backed by the tavily-python SDK."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout_s: float = 30.0,
        client: Optional[TavilyClient] = None,
    ) -> None:
        if not api_key:
            raise ValueError("Tavily API key is required")
        self.timeout_s = timeout_s
        self._client = client or TavilyClient(api_key=api_key)

    def search(self, query: str, *, max_results: int = 5, search_depth: str = "advanced") -> List[str]:
        """
        Run one search.

        Raises:
            SearchError: the SDK call failed or returned an unexpected body
        """
        try:
            res = self._client.search(
                query=query,
                search_depth=search_depth,
                max_results=max_results,
                include_answer=False,
                timeout=int(self.timeout_s),
            )
        except requests.exceptions.HTTPError as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.error(f"Tavily returned error {status}: {e}")
            raise SearchError(f"Web search provider returned status {status}", status_code=status) from e
        except Exception as e:
            # SDK raises its own error types (invalid key, usage limit) and requests errors
            raise SearchError(f"Tavily search failed: {e}") from e

        if not isinstance(res, dict):
            raise SearchError(f"Unexpected Tavily response type: {type(res).__name__}")

        results = res.get("results") or []
        return [
            str(r.get("content") or "")
            for r in results
            if isinstance(r, dict) and r.get("content")
        ]
