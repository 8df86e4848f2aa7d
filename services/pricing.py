import logging
import math
from decimal import Decimal, ROUND_HALF_UP

import config
from exceptions import InvalidPricingException, PriceMismatchException

logger = logging.getLogger(__name__)

# Absorbs binary float noise when comparing against the tolerance (0.1 + 0.2 style)
_FLOAT_EPSILON = 1e-9


class PricingService:
    """
    Money arithmetic shared by the cart, order placement and payment intents.

    Prices are plain floats in major currency units. Cart totals keep the exact
    line sum; rounding happens only at verification and minor-unit conversion.
    """

    @staticmethod
    def coerce_price(value) -> float:
        """
        Lenient numeric coercion for client-submitted price fields.

        Missing, empty, non-numeric and non-finite values become 0.0. Negative
        numbers are returned unchanged so validation can reject them.
        """
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(number):
            return 0.0
        return number

    @staticmethod
    def round_price(value: float) -> float:
        return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    @staticmethod
    def to_minor_units(amount: float) -> int:
        """Major units -> minor units (paise / cents) for the card gateway."""
        return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def validate_price_fields(items_price, tax_price, shipping_price, total_price) -> tuple[float, float, float, float]:
        """
        Coerce the four submitted price fields and reject negatives.

        Raises:
            InvalidPricingException: If any field is negative
        """
        fields = {
            "items_price": PricingService.coerce_price(items_price),
            "tax_price": PricingService.coerce_price(tax_price),
            "shipping_price": PricingService.coerce_price(shipping_price),
            "total_price": PricingService.coerce_price(total_price),
        }
        negative = [name for name, value in fields.items() if value < 0]
        if negative:
            raise InvalidPricingException(details={"negative_fields": negative})
        return fields["items_price"], fields["tax_price"], fields["shipping_price"], fields["total_price"]

    @staticmethod
    def verify_total(items_price: float, tax_price: float, shipping_price: float, total_price: float) -> float:
        """
        Check total == items + tax + shipping within the configured tolerance.

        Returns:
            The expected total (rounded to 2 decimals)

        Raises:
            PriceMismatchException: If the submitted total is off by more than the tolerance
        """
        expected = PricingService.round_price(items_price + tax_price + shipping_price)
        if abs(total_price - expected) > config.PRICE_TOLERANCE + _FLOAT_EPSILON:
            logger.warning(f"Total price mismatch: expected={expected}, received={total_price}")
            raise PriceMismatchException(expected=expected, received=total_price)
        return expected

    @staticmethod
    def verify_items_price(items_price: float, cart_total: float) -> None:
        if abs(items_price - cart_total) > config.PRICE_TOLERANCE + _FLOAT_EPSILON:
            logger.warning(f"Items price mismatch: cart_total={cart_total}, received={items_price}")
            raise PriceMismatchException(expected=cart_total, received=items_price, field="items_price")

    @staticmethod
    def cart_total(lines) -> float:
        """Sum of price x quantity over cart lines (ORM rows or DTOs). Not rounded."""
        return float(sum((line.price or 0.0) * (line.quantity or 0) for line in lines))
