from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"

    @classmethod
    def from_client(cls, value: str | None) -> 'PaymentStatus':
        """
        Normalize a gateway-reported status.

        The card gateway reports "succeeded"; the storefront client may send
        "Paid". Everything else is treated as not yet settled.
        """
        if value and value.strip().lower() in ("paid", "succeeded"):
            return cls.PAID
        return cls.PENDING
