"""
Module to contain base class for Delivery channels
"""
from abc import ABC, abstractmethod


class DeliveryError(Exception):
    """Raised when a channel fails to deliver the digest."""


class DeliveryChannel(ABC):
    """
    Base interface for all delivery channels.
    """

    name: str

    @abstractmethod
    async def send(
        self,
        *,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> str:
        """
        Deliver the rendered digest and return a delivery identifier.
        Must raise DeliveryError on failure (handled upstream).
        """
        raise NotImplementedError
