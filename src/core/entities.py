from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class MatchedBy(str, Enum):
    """
    Reason an article was recognised as already processed.
    """
    NONE = "none"
    URL = "url"
    TITLE_AND_DATE = "title_and_date"


@dataclass(frozen=True)
class ProcessedArticle:
    """
    Persisted record marking an article as already handled.
    """
    url: str
    title: str
    normalized_title: str
    published_at: str
    processed_at: str
    published_date: Optional[str] = None


@dataclass(frozen=True)
class DedupResult:
    """
    Outcome of a single existence check against the article store.
    """
    exists: bool
    matched_by: MatchedBy = MatchedBy.NONE
    existing_url: Optional[str] = None
    existing_title: Optional[str] = None
    processed_at: Optional[str] = None


@dataclass(frozen=True)
class SkippedArticle:
    title: str
    matched_by: MatchedBy
    existing_url: Optional[str] = None


@dataclass(frozen=True)
class FailedLookup:
    title: str
    url: str
    error: str


@dataclass(frozen=True)
class ArticleSummary:
    """
    Digest-ready unit: one summarized article.
    """
    title: str
    source: str
    url: str
    published_at: str
    summary: str


@dataclass
class RunStats:
    fetched: int = 0
    new: int = 0
    skipped: int = 0
    failed_lookups: int = 0
    relevant: int = 0
    summarized: int = 0


@dataclass
class RunResult:
    """
    Observable record produced by every pipeline run.
    """
    sent: bool
    articles_count: int = 0
    message_id: Optional[str] = None
    message: Optional[str] = None
    stats: RunStats = field(default_factory=RunStats)
    summaries: List[ArticleSummary] = field(default_factory=list)
