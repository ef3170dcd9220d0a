"""Push notification transport interface."""

from typing import Protocol

from diapets.domain.notifications import DeliveryResult


class PushTransport(Protocol):
    """Interface for delivering push notifications to device addresses."""

    async def send(
        self, addresses: list[str], title: str, body: str
    ) -> list[DeliveryResult]:
        """Send a notification to each address and report per-address results."""
