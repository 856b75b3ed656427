"""
Renders summarized articles into the digest email (HTML and plain text).
"""
from datetime import date
from typing import Dict, List, Optional, Sequence
import html as html_escape

from core.entities import ArticleSummary
from processing.normalizer import date_only

DEFAULT_COLORS = {
    "primary": "#3498db",
    "primary_dark": "#2980b9",
    "background": "#f5f5f5",
    "card_bg": "#ffffff",
    "heading": "#2c3e50",
    "text_primary": "#333333",
    "text_secondary": "#7f8c8d",
    "summary_text": "#555555",
    "border": "#eeeeee",
}

EMPTY_MESSAGE = "No new AI articles today. Check back tomorrow."


def format_published(value: str) -> str:
    """M/D/YYYY for a parseable timestamp, otherwise the raw value."""
    try:
        day = date.fromisoformat(date_only(value))
    except ValueError:
        return value
    return f"{day.month}/{day.day}/{day.year}"


def format_long_date(day: date) -> str:
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def build_subject(count: int, digest_date: date) -> str:
    return f"🤖 Daily AI News Digest - {digest_date:%A}, {digest_date:%B} {digest_date.day} ({count} new articles)"


def _article_card(idx: int, item: ArticleSummary, c: Dict[str, str]) -> str:
    return f'''
      <div style="margin-bottom: 30px; padding-bottom: 20px; border-bottom: 1px solid {c['border']};">
        <div style="font-size: 18px; font-weight: 600; color: {c['heading']}; margin-bottom: 8px;">
          {idx}. {html_escape.escape(item.title)}
        </div>
        <div style="font-size: 12px; color: {c['text_secondary']}; margin-bottom: 12px;">
          {html_escape.escape(item.source)} &bull; {html_escape.escape(format_published(item.published_at))}
        </div>
        <div style="color: {c['summary_text']}; margin-bottom: 12px; line-height: 1.7;">
          {html_escape.escape(item.summary)}
        </div>
        <a href="{html_escape.escape(item.url)}"
           style="display: inline-block; color: {c['primary']}; text-decoration: none; font-weight: 500;">
          Read full article &rarr;
        </a>
      </div>
    '''


def render_html(
    summaries: Sequence[ArticleSummary],
    digest_date: date,
    colors: Optional[Dict[str, str]] = None,
) -> str:
    """Build the self-contained HTML digest."""
    c = {**DEFAULT_COLORS, **(colors or {})}

    if summaries:
        intro = f"Your daily selection of {len(summaries)} new AI and machine learning articles."
        body = "".join(_article_card(idx, item, c) for idx, item in enumerate(summaries, 1))
    else:
        intro = EMPTY_MESSAGE
        body = ""

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Daily AI News Digest</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
             line-height: 1.6; color: {c['text_primary']}; max-width: 800px; margin: 0 auto;
             padding: 20px; background-color: {c['background']};">
  <div style="background-color: {c['card_bg']}; padding: 30px; border-radius: 8px;
              box-shadow: 0 2px 4px rgba(0,0,0,0.1);">
    <h1 style="color: {c['heading']}; border-bottom: 3px solid {c['primary']};
               padding-bottom: 10px; margin-bottom: 30px;">🤖 Daily AI News Digest</h1>
    <p style="color: {c['text_secondary']}; margin-bottom: 30px;">{format_long_date(digest_date)}</p>
    <p style="margin-bottom: 30px;">{intro}</p>
    {body}
    <div style="margin-top: 40px; padding-top: 20px; border-top: 2px solid {c['border']};
                text-align: center; font-size: 12px; color: {c['text_secondary']};">
      <p>This is your automated AI news digest.</p>
      <p>Stay informed about the latest developments in artificial intelligence.</p>
    </div>
  </div>
</body>
</html>
'''


def render_plain_text(summaries: Sequence[ArticleSummary], digest_date: date) -> str:
    """Build a plain text version of the digest."""
    lines: List[str] = [
        "=" * 60,
        "Daily AI News Digest",
        format_long_date(digest_date),
        "=" * 60,
        "",
    ]

    if not summaries:
        lines.append(EMPTY_MESSAGE)
        return "\n".join(lines)

    lines.append(f"Your daily selection of {len(summaries)} new AI and machine learning articles.")
    lines.append("")

    for idx, item in enumerate(summaries, 1):
        lines.extend([
            "-" * 60,
            f"{idx}. {item.title}",
            f"{item.source} - {format_published(item.published_at)}",
            "",
            item.summary,
            "",
            f"Read full article: {item.url}",
            "",
        ])

    return "\n".join(lines)
