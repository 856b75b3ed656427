"""
Pipeline Factory - Creates the daily news pipeline from configuration.
"""
import logging

from delivery.email_delivery import EmailDelivery
from ingestion.source_factory import create_adapters_from_config
from processing.evaluator import RelevanceClassifier
from processing.summarizer import Summarizer
from services.article_store import ArticleStore
from services.config import Config
from services.database import Database
from services.llm import OllamaClient
from workflows.daily_news import DailyNewsPipeline

logger = logging.getLogger(__name__)


def create_pipeline_from_config(config: Config) -> DailyNewsPipeline:
    """
    Wire shared services and collaborators into a DailyNewsPipeline.

    Args:
        config: Validated configuration

    Returns:
        Ready-to-run DailyNewsPipeline
    """
    llm = OllamaClient(
        base_url=config.OLLAMA_BASE_URL,
        model=config.OLLAMA_MODEL,
        timeout=config.LLM_TIMEOUT,
    )

    store = ArticleStore(Database(config.DATABASE_PATH))

    notifier = EmailDelivery(
        smtp_host=config.EMAIL_SMTP_HOST,
        smtp_port=config.EMAIL_SMTP_PORT,
        username=config.EMAIL_USERNAME,
        password=config.EMAIL_PASSWORD,
        sender=config.EMAIL_FROM,
        recipients=config.recipients,
    )

    pipeline = DailyNewsPipeline(
        sources=create_adapters_from_config(config),
        store=store,
        classifier=RelevanceClassifier(llm),
        summarizer=Summarizer(llm),
        notifier=notifier,
        colors=config.email_colors.model_dump(),
    )
    logger.info(f"Created pipeline: {pipeline.name} ({len(pipeline.sources)} source(s))")
    return pipeline
