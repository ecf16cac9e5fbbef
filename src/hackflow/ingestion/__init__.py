"""
Ingestion Layer for HackFlow.

This package handles fetching, filtering, LLM extraction, freshness
classification and deduplicated persistence of hackathon announcements.

Key Components:
- ChannelFetcher: Telegram preview page fetcher
- PostFilter: keyword and age gates
- HackathonExtractor: LLM-based structured extraction
- DeduplicationGate: title-based insert-if-absent
- IngestionCycle / CycleScheduler: periodic sequential ingestion
"""
