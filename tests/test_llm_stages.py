from __future__ import annotations

import asyncio

import httpx
import pytest

from core.personas import NEWS_SUMMARIZER, RELEVANCE_FILTER
from fakes import FakeLLM, make_article
from processing.evaluator import RelevanceClassifier, build_relevance_prompt, is_relevant_answer
from processing.summarizer import Summarizer, build_summary_prompt
import services.llm as llm_mod
from services.llm import OllamaClient


@pytest.mark.parametrize("answer", ["Yes", "YES", "yes please", "Yes.", "I think yes, it is relevant"])
def test_answers_containing_yes_are_relevant(answer: str) -> None:
    assert is_relevant_answer(answer) is True


@pytest.mark.parametrize("answer", ["No", "", "maybe", "NO.", "Not really"])
def test_other_answers_are_not_relevant(answer: str) -> None:
    assert is_relevant_answer(answer) is False


def test_substring_rule_is_deliberately_loose() -> None:
    assert is_relevant_answer("No, but the eyes have it") is True


def test_relevance_prompt_fields() -> None:
    article = make_article("https://a", "GPT-5 Released", source="The Verge")

    prompt = build_relevance_prompt(article)

    assert "Title: GPT-5 Released" in prompt
    assert "Source: The Verge" in prompt
    assert "Published: 2024-06-01T10:00:00Z" in prompt
    assert "Description: No description available" in prompt
    assert "Content:" not in prompt
    assert prompt.rstrip().endswith('Please respond with "Yes" or "No".')


def test_prompts_include_content_when_present() -> None:
    article = make_article("https://a", description="Short blurb", content="Full body text")

    assert "Description: Short blurb" in build_summary_prompt(article)
    assert "Content: Full body text" in build_summary_prompt(article)
    assert "Content: Full body text" in build_relevance_prompt(article)


def test_classifier_uses_filter_instructions() -> None:
    llm = FakeLLM(answer="Yes, this is about LLMs.")
    classifier = RelevanceClassifier(llm)

    assert asyncio.run(classifier.is_relevant(make_article("https://a"))) is True
    assert llm.instructions == [RELEVANCE_FILTER.instructions]


def test_classifier_rejects_no() -> None:
    classifier = RelevanceClassifier(FakeLLM(answer="No"))

    assert asyncio.run(classifier.is_relevant(make_article("https://a"))) is False


def test_summarizer_builds_summary() -> None:
    llm = FakeLLM(answer="  GPT-5 is out. It is big.  ")
    summarizer = Summarizer(llm)
    article = make_article("https://a", "  GPT-5 Released ", source="Wired")

    summary = asyncio.run(summarizer.summarize(article))

    assert summary.title == "GPT-5 Released"
    assert summary.source == "Wired"
    assert summary.url == "https://a"
    assert summary.published_at == "2024-06-01T10:00:00Z"
    assert summary.summary == "GPT-5 is out. It is big."
    assert llm.prompts[0].startswith("Summarize this AI news article in 2-3 concise sentences:")
    assert llm.instructions == [NEWS_SUMMARIZER.instructions]


def test_ollama_health_check(monkeypatch) -> None:
    status = {"code": 200}
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(status["code"], json={"models": []})

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(llm_mod.httpx, "AsyncClient", client_factory)
    client = OllamaClient(base_url="http://localhost:11434/v1", model="llama3.1:8b")

    assert client.base_url == "http://localhost:11434"
    assert asyncio.run(client.health_check()) is True

    status["code"] = 500
    assert asyncio.run(client.health_check()) is False
