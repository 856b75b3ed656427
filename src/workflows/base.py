"""
Contains base class for digest workflows
"""
from abc import ABC, abstractmethod

from core.entities import RunResult


class DigestWorkflow(ABC):
    """
    Orchestrates fetch → dedup → relevance → summarize+persist → notify
    for one scheduled tick.
    """

    name: str

    @abstractmethod
    async def run(self) -> RunResult:
        """
        Execute the workflow once and return its result record.
        Fetch and notify failures propagate; per-article failures do not.
        """
        raise NotImplementedError
