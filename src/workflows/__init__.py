"""
Workflows module - Pipeline orchestration for digest generation.
"""
from workflows.base import DigestWorkflow
from workflows.daily_news import DailyNewsPipeline
from workflows.pipeline_factory import create_pipeline_from_config

__all__ = [
    "DigestWorkflow",
    "DailyNewsPipeline",
    "create_pipeline_from_config",
]
