from __future__ import annotations

import asyncio
from datetime import date

import aiosmtplib
import pytest

from core.entities import ArticleSummary
from delivery.base import DeliveryError
from delivery.digest_renderer import (
    EMPTY_MESSAGE,
    build_subject,
    format_published,
    render_html,
    render_plain_text,
)
from delivery.email_delivery import EmailDelivery

DIGEST_DATE = date(2024, 6, 3)


def _summary(idx: int, **overrides) -> ArticleSummary:
    fields = {
        "title": f"Story {idx}",
        "source": "TechCrunch",
        "url": f"https://example.com/{idx}",
        "published_at": "2024-06-01T10:00:00Z",
        "summary": f"Summary {idx}.",
    }
    fields.update(overrides)
    return ArticleSummary(**fields)


def _email(**overrides) -> EmailDelivery:
    fields = {
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "username": "bot",
        "password": "secret",
        "sender": "digest@example.com",
        "recipients": ["a@example.com", "b@example.com"],
    }
    fields.update(overrides)
    return EmailDelivery(**fields)


def test_format_published() -> None:
    assert format_published("2024-06-01T10:00:00Z") == "6/1/2024"
    assert format_published("2024-11-23") == "11/23/2024"
    assert format_published("garbage") == "garbage"


def test_build_subject() -> None:
    assert build_subject(3, DIGEST_DATE) == "🤖 Daily AI News Digest - Monday, June 3 (3 new articles)"


def test_render_html_lists_articles_with_one_based_index() -> None:
    html = render_html([_summary(1), _summary(2)], DIGEST_DATE)

    assert "1. Story 1" in html
    assert "2. Story 2" in html
    assert 'href="https://example.com/2"' in html
    assert "TechCrunch &bull; 6/1/2024" in html
    assert "Monday, June 3, 2024" in html
    assert "Your daily selection of 2 new AI and machine learning articles." in html


def test_render_html_escapes_untrusted_text() -> None:
    html = render_html([_summary(1, title="<script>alert(1)</script>", summary="A & B")], DIGEST_DATE)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "A &amp; B" in html


def test_render_html_applies_custom_colors() -> None:
    html = render_html([_summary(1)], DIGEST_DATE, colors={"primary": "#ff0000"})

    assert "#ff0000" in html


def test_render_empty_digest() -> None:
    assert EMPTY_MESSAGE in render_html([], DIGEST_DATE)
    assert EMPTY_MESSAGE in render_plain_text([], DIGEST_DATE)


def test_render_plain_text() -> None:
    text = render_plain_text([_summary(1)], DIGEST_DATE)

    assert "1. Story 1" in text
    assert "TechCrunch - 6/1/2024" in text
    assert "Read full article: https://example.com/1" in text


def test_email_requires_recipients() -> None:
    with pytest.raises(ValueError):
        _email(recipients=[])


def test_email_send_returns_message_id(monkeypatch) -> None:
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))
        return {}, "OK"

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    message_id = asyncio.run(_email().send(subject="Digest", html_body="<p>hi</p>", text_body="hi"))

    message, kwargs = calls[0]
    assert message_id == message["Message-ID"]
    assert message["To"] == "a@example.com, b@example.com"
    assert message["Subject"] == "Digest"
    assert kwargs["hostname"] == "smtp.example.com"
    assert kwargs["port"] == 587
    assert kwargs["start_tls"] is True
    assert message.get_body(preferencelist=("html",)).get_content().strip() == "<p>hi</p>"


def test_email_send_wraps_smtp_errors(monkeypatch) -> None:
    async def failing_send(message, **kwargs):
        raise aiosmtplib.SMTPException("connection refused")

    monkeypatch.setattr(aiosmtplib, "send", failing_send)

    with pytest.raises(DeliveryError) as excinfo:
        asyncio.run(_email().send(subject="Digest", html_body="<p>hi</p>", text_body="hi"))

    assert "connection refused" in str(excinfo.value)
