"""
Ingest AI stories from Hacker News
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from pydantic import ValidationError

from core.schemas import HackerNewsStory
from ingestion.base import ArticleSource, CandidateArticle, FetchError, FetchResult, SourceAdapter

logger = logging.getLogger(__name__)

AI_KEYWORDS = [
    "ai", "artificial intelligence", "machine learning", "llm", "llms",
    "chatgpt", "gpt", "openai", "deep learning", "neural network",
    "transformer", "transformer model", "claude", "gemini", "anthropic",
]


def is_ai_story(story: HackerNewsStory) -> bool:
    if not story.title:
        return False
    title = story.title.lower()
    text = (story.text or "").lower()
    return any(k in title or k in text for k in AI_KEYWORDS)


def _iso_timestamp(epoch: Optional[int]) -> str:
    if epoch:
        moment = datetime.fromtimestamp(epoch, tz=timezone.utc)
    else:
        moment = datetime.now(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HackerNewsAdapter(SourceAdapter):
    name = "hackernews"
    BASE_URL = "https://hacker-news.firebaseio.com/v0"
    ITEM_URL = "https://news.ycombinator.com/item?id={id}"

    def __init__(
        self,
        limit: int = 20,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.limit = limit
        self.timeout = timeout
        self.transport = transport

    async def fetch_articles(self, limit: Optional[int] = None) -> FetchResult:
        stories: List[HackerNewsStory] = []

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(f"{self.BASE_URL}/topstories.json")
                resp.raise_for_status()

                story_ids = resp.json()[:limit or self.limit]

                for sid in story_ids:
                    story_resp = await client.get(f"{self.BASE_URL}/item/{sid}.json")
                    story_resp.raise_for_status()

                    data = story_resp.json()
                    if not data:
                        continue
                    try:
                        stories.append(HackerNewsStory.model_validate(data))
                    except ValidationError as e:
                        logger.warning(f"Dropping malformed Hacker News item {sid}: {e}")

        except httpx.HTTPStatusError as e:
            raise FetchError(self.name, str(e), status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise FetchError(self.name, str(e)) from e

        articles = [
            CandidateArticle(
                title=story.title or "Untitled",
                description=story.text or None,
                url=story.url or self.ITEM_URL.format(id=story.id),
                published_at=_iso_timestamp(story.time),
                source=ArticleSource(name="Hacker News"),
                content=None,
            )
            for story in stories
            if is_ai_story(story)
        ]

        logger.info(f"Found {len(articles)} AI-related stories out of {len(stories)} total HN stories")
        return FetchResult(articles=articles, total_results=len(articles))
