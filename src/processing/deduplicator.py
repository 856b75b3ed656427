import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from core.entities import DedupResult, FailedLookup, MatchedBy, SkippedArticle
from ingestion.base import CandidateArticle

logger = logging.getLogger(__name__)


class ArticleLookup(Protocol):
    async def check_exists(
        self,
        url: str,
        title: Optional[str] = None,
        published_at: Optional[str] = None,
    ) -> DedupResult:
        ...


@dataclass
class DedupOutcome:
    """
    Partition of a candidate batch. Each list keeps input order.

    The three lists together cover the input; when lookups fail,
    new_articles and skipped alone do not.
    """
    new_articles: List[CandidateArticle] = field(default_factory=list)
    skipped: List[SkippedArticle] = field(default_factory=list)
    failed: List[FailedLookup] = field(default_factory=list)


async def filter_new_articles(
    candidates: Sequence[CandidateArticle],
    store: ArticleLookup,
) -> DedupOutcome:
    """
    Split candidates into new and already-seen articles.

    A URL repeated inside the batch is skipped as a URL match. A store error
    for one candidate is recorded in `failed` rather than `skipped`, and the
    batch continues.
    """
    outcome = DedupOutcome()
    seen_urls = set()

    for article in candidates:
        if article.url in seen_urls:
            logger.info(f"Skipping duplicate: \"{article.title}\" (matched by url, repeated in batch)")
            outcome.skipped.append(
                SkippedArticle(title=article.title, matched_by=MatchedBy.URL, existing_url=article.url)
            )
            continue

        try:
            result = await store.check_exists(
                article.url,
                title=article.title or None,
                published_at=article.published_at or None,
            )
        except Exception as e:
            logger.error(f"Error checking article {article.url}: {e}")
            outcome.failed.append(FailedLookup(title=article.title, url=article.url, error=str(e)))
            continue

        seen_urls.add(article.url)

        if result.exists:
            logger.info(f"Skipping duplicate: \"{article.title}\" (matched by {result.matched_by.value})")
            outcome.skipped.append(
                SkippedArticle(
                    title=article.title,
                    matched_by=result.matched_by,
                    existing_url=result.existing_url,
                )
            )
        else:
            outcome.new_articles.append(article)

    logger.info(
        f"Found {len(outcome.new_articles)} new articles, skipped {len(outcome.skipped)} duplicates"
        + (f", {len(outcome.failed)} lookups failed" if outcome.failed else "")
    )
    return outcome
