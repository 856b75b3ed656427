from __future__ import annotations

import asyncio
from datetime import date

import pytest

from delivery.base import DeliveryError
from fakes import FakeClassifier, FakeLLM, FakeNotifier, FakeSource, FakeSummarizer, make_article
from ingestion.base import FetchError
from processing.evaluator import RelevanceClassifier
from processing.summarizer import Summarizer
from services.article_store import ArticleStore
from workflows.daily_news import DailyNewsPipeline


def _pipeline(store, articles=(), *, source=None, classifier=None, summarizer=None, notifier=None):
    return DailyNewsPipeline(
        sources=[source or FakeSource(articles)],
        store=store,
        classifier=classifier or FakeClassifier(),
        summarizer=summarizer or FakeSummarizer(),
        notifier=notifier or FakeNotifier(),
        today=lambda: date(2024, 6, 3),
    )


def test_full_run_sends_digest_and_persists(store: ArticleStore) -> None:
    articles = [make_article("https://a", "GPT-5 Released"), make_article("https://b", "New Diffusion Model")]
    notifier = FakeNotifier()

    async def scenario():
        result = await _pipeline(store, articles, notifier=notifier).run()
        return result, await store.get_all_processed()

    result, records = asyncio.run(scenario())

    assert result.sent is True
    assert result.articles_count == 2
    assert result.message_id == "<msg-1@example.com>"
    assert result.stats.fetched == 2
    assert result.stats.new == 2
    assert result.stats.relevant == 2
    assert result.stats.summarized == 2
    assert {r.url for r in records} == {"https://a", "https://b"}

    sent = notifier.sent[0]
    assert sent["subject"] == "🤖 Daily AI News Digest - Monday, June 3 (2 new articles)"
    assert "1. GPT-5 Released" in sent["html_body"]
    assert "2. New Diffusion Model" in sent["html_body"]
    assert "Summary of GPT-5 Released." in sent["text_body"]


def test_second_run_skips_already_processed(store: ArticleStore) -> None:
    candidate = make_article("https://a", "GPT-5 Released", "2024-06-01T10:00:00Z")

    async def scenario():
        first = await _pipeline(store, [candidate]).run()
        second_pipeline = _pipeline(store, [candidate])
        outcome = await second_pipeline.deduplicate([candidate])
        second = await second_pipeline.run()
        return first, outcome, second

    first, outcome, second = asyncio.run(scenario())

    assert first.stats.new == 1
    assert outcome.new_articles == []
    assert len(outcome.skipped) == 1
    assert outcome.skipped[0].matched_by.value == "url"
    assert second.sent is False
    assert second.stats.skipped == 1


def test_no_relevant_articles_still_reaches_notify(store: ArticleStore) -> None:
    articles = [make_article("https://casino", "Best Casino Bonuses")]
    notifier = FakeNotifier()
    summarizer = FakeSummarizer()
    pipeline = _pipeline(
        store,
        articles,
        classifier=FakeClassifier(irrelevant={"https://casino"}),
        summarizer=summarizer,
        notifier=notifier,
    )

    result = asyncio.run(pipeline.run())

    assert result.sent is False
    assert result.articles_count == 0
    assert result.message == "No new articles to send"
    assert result.stats.relevant == 0
    assert summarizer.seen == []
    assert notifier.sent == []


def test_summarizer_failure_drops_only_that_article(store: ArticleStore) -> None:
    articles = [make_article(f"https://{n}", f"Story {n}") for n in ("one", "two", "three")]
    notifier = FakeNotifier()
    pipeline = _pipeline(
        store,
        articles,
        summarizer=FakeSummarizer(failing={"https://two"}),
        notifier=notifier,
    )

    async def scenario():
        result = await pipeline.run()
        return result, await store.find_by_url("https://two"), await store.get_all_processed()

    result, missing, records = asyncio.run(scenario())

    assert result.sent is True
    assert [s.url for s in result.summaries] == ["https://one", "https://three"]
    assert missing is None
    assert {r.url for r in records} == {"https://one", "https://three"}
    assert "Story two" not in notifier.sent[0]["html_body"]


def test_classifier_failure_drops_only_that_article(store: ArticleStore) -> None:
    articles = [make_article(f"https://{n}", f"Story {n}") for n in ("one", "two", "three")]
    classifier = FakeClassifier(failing={"https://one"})

    result = asyncio.run(_pipeline(store, articles, classifier=classifier).run())

    assert classifier.seen == ["https://one", "https://two", "https://three"]
    assert result.stats.relevant == 2
    assert [s.url for s in result.summaries] == ["https://two", "https://three"]


def test_fetch_failure_is_fatal(store: ArticleStore) -> None:
    source = FakeSource(error=FetchError("newsapi", "rate limited", status_code=429))
    classifier = FakeClassifier()
    notifier = FakeNotifier()

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(_pipeline(store, source=source, classifier=classifier, notifier=notifier).run())

    assert excinfo.value.status_code == 429
    assert classifier.seen == []
    assert notifier.sent == []


def test_notify_failure_propagates_after_persisting(store: ArticleStore) -> None:
    articles = [make_article("https://a", "GPT-5 Released")]
    notifier = FakeNotifier(error=DeliveryError("smtp down"))
    pipeline = _pipeline(store, articles, notifier=notifier)

    with pytest.raises(DeliveryError):
        asyncio.run(pipeline.run())

    assert asyncio.run(store.find_by_url("https://a")) is not None


def test_each_article_is_persisted_before_the_next_is_summarized(store: ArticleStore) -> None:
    articles = [make_article("https://a", "Story a"), make_article("https://b", "Story b")]
    observed = []

    class _CheckingSummarizer(FakeSummarizer):
        async def summarize(self, article):
            observed.append([r.url for r in await store.get_all_processed()])
            return await super().summarize(article)

    asyncio.run(_pipeline(store, articles, summarizer=_CheckingSummarizer()).run())

    assert observed == [[], ["https://a"]]


def test_sources_are_merged_in_order(store: ArticleStore) -> None:
    first = FakeSource([make_article("https://a", "Story a")])
    second = FakeSource([make_article("https://b", "Story b"), make_article("https://a", "Story a again")])
    pipeline = DailyNewsPipeline(
        sources=[first, second],
        store=store,
        classifier=FakeClassifier(),
        summarizer=FakeSummarizer(),
        notifier=FakeNotifier(),
    )

    result = asyncio.run(pipeline.run())

    assert result.stats.fetched == 3
    assert result.stats.skipped == 1
    assert [s.url for s in result.summaries] == ["https://a", "https://b"]


def test_run_with_llm_backed_collaborators(store: ArticleStore) -> None:
    llm = FakeLLM(answer="Yes")
    pipeline = _pipeline(
        store,
        [make_article("https://a", "GPT-5 Released")],
        classifier=RelevanceClassifier(llm),
        summarizer=Summarizer(llm),
    )

    result = asyncio.run(pipeline.run())

    assert result.sent is True
    assert result.summaries[0].summary == "Yes"
    assert len(llm.prompts) == 2
