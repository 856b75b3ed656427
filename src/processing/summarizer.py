from core.entities import ArticleSummary
from core.personas import Persona, NEWS_SUMMARIZER
from ingestion.base import CandidateArticle
from processing.evaluator import TextGenerator, render_article_fields


def build_summary_prompt(article: CandidateArticle) -> str:
    return f"Summarize this AI news article in 2-3 concise sentences:\n\n{render_article_fields(article)}"


def to_summary(article: CandidateArticle, summary: str) -> ArticleSummary:
    return ArticleSummary(
        title=article.title.strip(),
        source=article.source.name,
        url=article.url,
        published_at=article.published_at,
        summary=summary.strip(),
    )


class Summarizer:
    """
    Produces a short newsletter summary per article.
    """

    def __init__(self, llm: TextGenerator, persona: Persona = NEWS_SUMMARIZER):
        self.llm = llm
        self.persona = persona

    async def summarize(self, article: CandidateArticle) -> ArticleSummary:
        text = await self.llm.generate(
            build_summary_prompt(article),
            instructions=self.persona.instructions,
        )
        return to_summary(article, text)
