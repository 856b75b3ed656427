"""
Ingest AI news from newsapi.org
"""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from core.schemas import NewsAPIArticle, NewsAPIResponse
from ingestion.base import ArticleSource, CandidateArticle, FetchError, FetchResult, SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_QUERY = '("artificial intelligence" OR "machine learning" OR "deep learning" OR LLM OR "Generative AI")'


class NewsAPIAdapter(SourceAdapter):
    name = "newsapi"
    BASE_URL = "https://newsapi.org/v2"

    def __init__(
        self,
        api_key: str,
        query: str = DEFAULT_QUERY,
        language: str = "en",
        limit: int = 10,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.query = query
        self.language = language
        self.limit = limit
        self.timeout = timeout
        self.transport = transport

    async def fetch_articles(self, limit: Optional[int] = None) -> FetchResult:
        params = {
            "q": self.query,
            "language": self.language,
            "sortBy": "publishedAt",
            "pageSize": limit or self.limit,
            "apiKey": self.api_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(f"{self.BASE_URL}/everything", params=params)
        except httpx.HTTPError as e:
            raise FetchError(self.name, str(e)) from e

        payload = self._parse_payload(resp)

        if resp.status_code != 200 or payload.status != "ok":
            raise FetchError(
                self.name,
                payload.message or resp.reason_phrase or "request failed",
                status_code=resp.status_code,
            )

        articles = self._to_candidates(payload.articles)
        logger.info(f"Fetched {len(articles)} articles from NewsAPI (total available: {payload.totalResults})")
        return FetchResult(articles=articles, total_results=payload.totalResults)

    def _parse_payload(self, resp: httpx.Response) -> NewsAPIResponse:
        try:
            return NewsAPIResponse.model_validate(resp.json())
        except (ValueError, ValidationError):
            if resp.status_code == 200:
                raise FetchError(self.name, "malformed response body", status_code=resp.status_code)
            return NewsAPIResponse(status="error")

    def _to_candidates(self, raw_articles: List[dict]) -> List[CandidateArticle]:
        candidates: List[CandidateArticle] = []

        for raw in raw_articles:
            try:
                item = NewsAPIArticle.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Dropping malformed NewsAPI article: {e}")
                continue

            if not item.title or not item.url or not item.publishedAt:
                logger.warning(f"Dropping incomplete NewsAPI article: {item.url or item.title}")
                continue

            candidates.append(
                CandidateArticle(
                    title=item.title,
                    description=item.description,
                    url=item.url,
                    published_at=item.publishedAt,
                    source=ArticleSource(name=item.source.name or "NewsAPI"),
                    content=item.content,
                )
            )

        return candidates
