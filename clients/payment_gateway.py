import asyncio
import logging
from typing import Protocol

import aiohttp

import config
from exceptions import PaymentGatewayException

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    async def create_payment_intent(self, amount: int, currency: str, metadata: dict[str, str]) -> str:
        """Create an intent for ``amount`` minor units and return its client secret."""
        ...


class StripePaymentGateway:
    """Card gateway adapter talking to the Stripe REST API over aiohttp."""

    def __init__(self,
                 secret_key: str | None = None,
                 base_url: str | None = None,
                 timeout_seconds: float | None = None):
        self.secret_key = secret_key if secret_key is not None else config.PAYMENT_GATEWAY_SECRET_KEY
        self.base_url = (base_url or config.PAYMENT_GATEWAY_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds or config.PAYMENT_GATEWAY_TIMEOUT_SECONDS)

    async def create_payment_intent(self, amount: int, currency: str, metadata: dict[str, str]) -> str:
        if not self.secret_key:
            raise PaymentGatewayException("Payment gateway is not configured")

        form = {"amount": str(amount), "currency": currency}
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value
        headers = {"Authorization": f"Bearer {self.secret_key}"}

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(f"{self.base_url}/payment_intents", data=form, headers=headers) as response:
                    body = await response.json(content_type=None)
                    if response.status >= 400:
                        error = body.get("error", {}) if isinstance(body, dict) else {}
                        logger.warning(f"Payment intent rejected: status={response.status}, "
                                       f"type={error.get('type')}, code={error.get('code')}")
                        raise PaymentGatewayException(error.get("message") or "Payment intent was rejected")
        except aiohttp.ClientError as e:
            logger.error(f"Payment gateway unreachable: {type(e).__name__}: {e}")
            raise PaymentGatewayException("Payment gateway is unavailable")
        except asyncio.TimeoutError:
            logger.error("Payment gateway timed out")
            raise PaymentGatewayException("Payment gateway timed out")
        except ValueError:
            logger.error("Payment gateway returned a non-JSON body")
            raise PaymentGatewayException("Payment gateway returned an invalid response")

        client_secret = body.get("client_secret") if isinstance(body, dict) else None
        if not client_secret:
            raise PaymentGatewayException("Payment gateway returned no client secret")
        logger.info(f"Payment intent {body.get('id')} created: amount={amount} {currency}")
        return client_secret
