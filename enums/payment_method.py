from enum import Enum


class PaymentMethod(str, Enum):
    GATEWAY = "Stripe"              # Paid up-front through the card gateway
    CASH_ON_DELIVERY = "COD"
    DIRECT_TRANSFER = "UPI"

    @property
    def is_deferred(self) -> bool:
        """Money is collected after placement (COD / transfer)."""
        return self in (PaymentMethod.CASH_ON_DELIVERY, PaymentMethod.DIRECT_TRANSFER)
