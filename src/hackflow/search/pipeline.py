"""
Ad-hoc search pipeline.

query -> web search -> one batch extraction -> records

Nothing is deduplicated or persisted; exactly one extraction call is made
per query regardless of how many snippets came back.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from hackflow.ingestion.normalization.extractor import HackathonExtractor
from hackflow.schemas.hackathon import Hackathon
from hackflow.search.tavily import SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_QUERY_PREFIX = "Hackathons IT events in Kazakhstan"


def build_web_context(snippets: Sequence[str]) -> str:
    """Join snippets into one blob with numbered separators."""
    return "".join(f"\n--- RESULT {i} ---\n{text}" for i, text in enumerate(snippets, start=1))


class AdhocSearchPipeline:
    """
    Live web search + LLM extraction for a free-text user query.

    Raises SearchError from ``run`` when the provider fails and
    ExtractionError when the batch extraction call fails.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        extractor: HackathonExtractor,
        *,
        query_prefix: str = DEFAULT_QUERY_PREFIX,
        max_results: int = 5,
        search_depth: str = "advanced",
    ):
        self.search_provider = search_provider
        self.extractor = extractor
        self.query_prefix = query_prefix
        self.max_results = max_results
        self.search_depth = search_depth

    def run(self, query: str, now: Optional[datetime] = None) -> List[Hackathon]:
        query = query.strip()
        logger.info("Starting web search extraction", extra={"query": query})

        search_query = f"{self.query_prefix} {query}".strip()
        snippets = self.search_provider.search(
            search_query, max_results=self.max_results, search_depth=self.search_depth
        )
        if not snippets:
            logger.info("No search results found", extra={"query": query})
            return []

        context = build_web_context(snippets)
        logger.debug(f"Web context sent to LLM: {context}", extra={"query": query})

        records = self.extractor.extract_batch(query, context, now=now)
        logger.info(f"Search extraction completed with {len(records)} results", extra={"query": query})
        return records
