"""
Base classes for Ingestion
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ArticleSource(BaseModel):
    name: str


class CandidateArticle(BaseModel):
    """
    Fetched, not yet deduplicated news item.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    url: str
    published_at: str = Field(alias="publishedAt")
    source: ArticleSource
    content: Optional[str] = None


@dataclass
class FetchResult:
    articles: List[CandidateArticle] = field(default_factory=list)
    total_results: int = 0


class FetchError(Exception):
    """
    Raised when an upstream news API call fails.
    """

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        self.source = source
        self.message = message
        self.status_code = status_code
        status = f" (status {status_code})" if status_code is not None else ""
        super().__init__(f"{source} error{status}: {message}")


class SourceAdapter(ABC):
    """
    Base interface for all ingestion sources.
    """

    name: str

    @abstractmethod
    async def fetch_articles(self, limit: Optional[int] = None) -> FetchResult:
        """
        Fetch the latest candidate articles (at most `limit`, or the
        adapter default).
        Must raise FetchError on upstream failure (fatal to the run).
        """
        raise NotImplementedError
