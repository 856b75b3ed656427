# src/workflows/daily_news.py
import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from core.entities import ArticleSummary, RunResult, RunStats
from delivery.base import DeliveryChannel
from delivery.digest_renderer import build_subject, render_html, render_plain_text
from ingestion.base import CandidateArticle, SourceAdapter
from processing.deduplicator import DedupOutcome, filter_new_articles
from processing.evaluator import RelevanceClassifier
from processing.summarizer import Summarizer
from services.article_store import ArticleStore
from workflows.base import DigestWorkflow

logger = logging.getLogger(__name__)


class DailyNewsPipeline(DigestWorkflow):
    """
    Five sequential stages over whole batches. Articles are handled one at a
    time inside each stage; a failing article is dropped, a failing fetch or
    notify fails the run.
    """

    name = "daily-ai-news"

    def __init__(
        self,
        *,
        sources: Sequence[SourceAdapter],
        store: ArticleStore,
        classifier: RelevanceClassifier,
        summarizer: Summarizer,
        notifier: DeliveryChannel,
        colors: Optional[Dict[str, str]] = None,
        today: Callable[[], date] = date.today,
    ):
        self.sources = list(sources)
        self.store = store
        self.classifier = classifier
        self.summarizer = summarizer
        self.notifier = notifier
        self.colors = colors
        self.today = today

    async def run(self) -> RunResult:
        stats = RunStats()
        logger.info(f"[{self.name}] Starting run")

        articles = await self.fetch()
        stats.fetched = len(articles)

        outcome = await self.deduplicate(articles)
        stats.new = len(outcome.new_articles)
        stats.skipped = len(outcome.skipped)
        stats.failed_lookups = len(outcome.failed)

        relevant = await self.filter_relevant(outcome.new_articles)
        stats.relevant = len(relevant)

        summaries = await self.summarize_and_persist(relevant)
        stats.summarized = len(summaries)

        result = await self.notify(summaries)
        result.stats = stats

        logger.info(
            f"[{self.name}] Run finished: fetched={stats.fetched} new={stats.new} "
            f"skipped={stats.skipped} relevant={stats.relevant} "
            f"summarized={stats.summarized} sent={result.sent}"
        )
        return result

    async def fetch(self) -> List[CandidateArticle]:
        """
        Collect candidates from every source. Any FetchError is fatal.
        """
        articles: List[CandidateArticle] = []
        for source in self.sources:
            result = await source.fetch_articles()
            logger.info(f"[{self.name}] {source.name}: fetched {len(result.articles)} articles (total available: {result.total_results})")
            articles.extend(result.articles)

        logger.info(f"[{self.name}] Fetched {len(articles)} articles from {len(self.sources)} source(s)")
        return articles

    async def deduplicate(self, articles: Sequence[CandidateArticle]) -> DedupOutcome:
        return await filter_new_articles(articles, self.store)

    async def filter_relevant(self, articles: Sequence[CandidateArticle]) -> List[CandidateArticle]:
        relevant: List[CandidateArticle] = []

        for article in articles:
            try:
                if await self.classifier.is_relevant(article):
                    relevant.append(article)
                else:
                    logger.info(f"Skipping non-relevant article: \"{article.title}\"")
            except Exception as e:
                logger.error(f"Error verifying relevance for article {article.title}: {e}")

        logger.info(
            f"[{self.name}] Found {len(relevant)} relevant articles, "
            f"skipped {len(articles) - len(relevant)} non-relevant or failed"
        )
        return relevant

    async def summarize_and_persist(self, articles: Sequence[CandidateArticle]) -> List[ArticleSummary]:
        """
        Summarize each article and record it in the store before moving on,
        so a later crash cannot cause it to be processed again.
        """
        summaries: List[ArticleSummary] = []

        for article in articles:
            try:
                summary = await self.summarizer.summarize(article)
                await self.store.save(article.url, article.title, article.published_at)
            except Exception as e:
                logger.error(f"Error processing article {article.title}: {e}")
                continue

            summaries.append(summary)

        logger.info(f"[{self.name}] Summarized {len(summaries)} of {len(articles)} articles")
        return summaries

    async def notify(self, summaries: Sequence[ArticleSummary]) -> RunResult:
        """
        Send the digest. An empty batch yields sent=False without contacting
        the channel; a delivery error propagates.
        """
        if not summaries:
            logger.info(f"[{self.name}] No new articles to send")
            return RunResult(sent=False, articles_count=0, message="No new articles to send")

        digest_date = self.today()
        message_id = await self.notifier.send(
            subject=build_subject(len(summaries), digest_date),
            html_body=render_html(summaries, digest_date, self.colors),
            text_body=render_plain_text(summaries, digest_date),
        )

        logger.info(f"[{self.name}] Digest sent via {self.notifier.name} with {len(summaries)} articles")
        return RunResult(
            sent=True,
            articles_count=len(summaries),
            message_id=message_id,
            summaries=list(summaries),
        )
