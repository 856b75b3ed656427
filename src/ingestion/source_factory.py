"""
Source Factory - Creates ingestion adapters from configuration.
"""
import logging
from typing import List

from ingestion.base import SourceAdapter
from ingestion.hackernews import HackerNewsAdapter
from ingestion.newsapi import NewsAPIAdapter
from services.config import Config, SourceConfig, get_enabled_sources

logger = logging.getLogger(__name__)


def create_source_adapter(source_config: SourceConfig, config: Config) -> SourceAdapter:
    """
    Create a source adapter from configuration.

    Args:
        source_config: Configuration for the source
        config: Global configuration holding credentials

    Returns:
        Configured SourceAdapter instance

    Raises:
        ValueError: If source type is unknown or lacks credentials
    """
    source_type = source_config.type.lower()

    if source_type == "newsapi":
        if not config.NEWS_API_KEY:
            raise ValueError("NewsAPI source requires NEWS_API_KEY")
        return NewsAPIAdapter(
            api_key=config.NEWS_API_KEY,
            query=config.NEWS_QUERY,
            language=config.NEWS_LANGUAGE,
            limit=config.NEWS_PAGE_SIZE,
        )

    elif source_type == "hackernews":
        return HackerNewsAdapter(limit=config.HACKERNEWS_LIMIT)

    else:
        raise ValueError(f"Unknown source type: {source_type}")


def create_adapters_from_config(config: Config) -> List[SourceAdapter]:
    """
    Create all enabled source adapters.

    Unlike per-article failures, a misconfigured source is not skipped:
    the error propagates so the process refuses to start.
    """
    adapters = []

    for source_config in get_enabled_sources(config):
        adapter = create_source_adapter(source_config, config)
        adapters.append(adapter)
        logger.info(f"Created {source_config.type} adapter")

    return adapters
