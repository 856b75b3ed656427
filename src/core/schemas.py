"""
Pydantic schemas for upstream news API payloads
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class NewsAPISource(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None


class NewsAPIArticle(BaseModel):
    """
    Single article as returned by newsapi.org /v2/everything
    """
    source: NewsAPISource = Field(default_factory=NewsAPISource)
    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    publishedAt: Optional[str] = None
    content: Optional[str] = None


class NewsAPIResponse(BaseModel):
    status: str = "ok"
    totalResults: int = 0
    articles: List[dict] = []
    code: Optional[str] = None
    message: Optional[str] = None


class HackerNewsStory(BaseModel):
    """
    Item returned by the Hacker News firebase API
    """
    id: int
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    text: Optional[str] = None
    time: Optional[int] = None
    score: Optional[int] = None
