import logging

from sqlalchemy.ext.asyncio import AsyncSession

import config
from clients.payment_gateway import PaymentGateway
from exceptions import EmptyCartException, InvalidPricingException
from repositories.cart import CartRepository
from services.pricing import PricingService


class PaymentService:

    @staticmethod
    async def create_payment_intent(user_id: int, gateway: PaymentGateway, session: AsyncSession) -> str:
        """
        Create a card-gateway intent for the user's current cart.

        The amount is computed from the cart lines (price snapshot x quantity),
        never taken from the client.

        Returns:
            The intent's client secret

        Raises:
            EmptyCartException: No cart or no items
            InvalidPricingException: Cart amount is not positive
            PaymentGatewayException: Gateway unreachable or intent rejected
        """
        cart = await CartRepository.get_by_user_id(user_id, session)
        if cart is None or cart.is_empty:
            raise EmptyCartException(user_id)

        amount = PricingService.cart_total(cart.items)
        if amount <= 0:
            raise InvalidPricingException("Invalid cart amount", details={"amount": amount})

        minor_units = PricingService.to_minor_units(amount)
        client_secret = await gateway.create_payment_intent(
            amount=minor_units,
            currency=config.CURRENCY,
            metadata={"company": config.PAYMENT_METADATA_COMPANY, "user_id": str(user_id)},
        )
        logging.info(f"Payment intent created for user {user_id}: {minor_units} {config.CURRENCY} (minor units)")
        return client_secret
