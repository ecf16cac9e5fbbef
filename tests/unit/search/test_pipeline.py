"""Unit tests for the ad-hoc search pipeline."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from hackflow.ingestion.errors import ExtractionError, SearchError
from hackflow.ingestion.normalization.extractor import HackathonExtractor
from hackflow.search.pipeline import AdhocSearchPipeline, build_web_context

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_build_web_context_numbers_results():
    assert build_web_context(["first", "second"]) == (
        "\n--- RESULT 1 ---\nfirst\n--- RESULT 2 ---\nsecond"
    )


class TestAdhocSearchPipeline:
    def test_zero_results_makes_no_llm_call(self, scripted_llm):
        provider = MagicMock()
        provider.search.return_value = []
        llm = scripted_llm()

        records = AdhocSearchPipeline(provider, HackathonExtractor(llm)).run("AI", now=NOW)

        assert records == []
        assert llm.prompts == []

    def test_one_llm_call_for_all_snippets(self, scripted_llm):
        provider = MagicMock()
        provider.search.return_value = ["snippet one", "snippet two", "snippet three"]
        items = [{"title": "Decentrathon", "city": "Астана"}, {"title": "AI Cup", "city": "Алматы"}]
        llm = scripted_llm(json.dumps(items, ensure_ascii=False))

        records = AdhocSearchPipeline(provider, HackathonExtractor(llm)).run("  AI  ", now=NOW)

        assert [r.title for r in records] == ["Decentrathon", "AI Cup"]
        assert len(llm.prompts) == 1
        assert "--- RESULT 3 ---" in llm.prompts[0]
        assert "'AI'" in llm.prompts[0]

    def test_query_prefix_and_options(self, scripted_llm):
        provider = MagicMock()
        provider.search.return_value = []

        AdhocSearchPipeline(
            provider, HackathonExtractor(scripted_llm()), query_prefix="Hackathons", max_results=3
        ).run("Astana")

        provider.search.assert_called_once_with("Hackathons Astana", max_results=3, search_depth="advanced")

    def test_provider_failure_propagates(self, scripted_llm):
        provider = MagicMock()
        provider.search.side_effect = SearchError("status 500", status_code=500)

        with pytest.raises(SearchError):
            AdhocSearchPipeline(provider, HackathonExtractor(scripted_llm())).run("AI")

    def test_extraction_failure_propagates(self, scripted_llm):
        provider = MagicMock()
        provider.search.return_value = ["snippet"]
        llm = scripted_llm(RuntimeError("quota exceeded"))

        with pytest.raises(ExtractionError):
            AdhocSearchPipeline(provider, HackathonExtractor(llm)).run("AI", now=NOW)
