"""Deterministic stand-ins for the external capabilities (AI completion, card gateway)."""

import asyncio
from typing import Any

from exceptions import PaymentGatewayException


class FakeCompletionClient:
    """
    Returns queued responses in order. A queued Exception instance is raised
    instead of returned; ``delay`` makes every call sleep first.
    """

    def __init__(self, responses: list | None = None, configured: bool = True, delay: float = 0.0):
        self.responses = list(responses or [])
        self.configured = configured
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def complete_json(self, system: str, user: str, temperature: float | None = None) -> dict[str, Any]:
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.responses:
            raise ConnectionError("no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakePaymentGateway:
    def __init__(self, client_secret: str = "pi_123_secret_456", error: str | None = None):
        self.client_secret = client_secret
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create_payment_intent(self, amount: int, currency: str, metadata: dict[str, str]) -> str:
        self.calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        if self.error:
            raise PaymentGatewayException(self.error)
        return self.client_secret
