import logging
from typing import Protocol, Optional

from core.personas import Persona, RELEVANCE_FILTER
from ingestion.base import CandidateArticle

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str, instructions: Optional[str] = None) -> str:
        ...


def render_article_fields(article: CandidateArticle) -> str:
    """
    Render the fields shared by the relevance and summary prompts.
    """
    text = f"""Title: {article.title}
Source: {article.source.name}
Published: {article.published_at}

Description: {article.description or 'No description available'}"""

    if article.content:
        text += f"\n\nContent: {article.content}"

    return text


def build_relevance_prompt(article: CandidateArticle) -> str:
    return f"""Is the following AI news article relevant to AI and ML?

{render_article_fields(article)}

Please respond with "Yes" or "No"."""


def is_relevant_answer(answer: str) -> bool:
    """
    Any answer containing "yes" (case-insensitive) counts as relevant;
    everything else, including empty or ambiguous answers, does not.
    """
    return "yes" in (answer or "").lower()


class RelevanceClassifier:
    """
    Binary AI/ML relevance decision backed by an LLM.
    """

    def __init__(self, llm: TextGenerator, persona: Persona = RELEVANCE_FILTER):
        self.llm = llm
        self.persona = persona

    async def is_relevant(self, article: CandidateArticle) -> bool:
        answer = await self.llm.generate(
            build_relevance_prompt(article),
            instructions=self.persona.instructions,
        )
        logger.debug(f"Relevance answer for '{article.title}': {answer!r}")
        return is_relevant_answer(answer)
