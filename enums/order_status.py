from enum import Enum


class OrderStatus(str, Enum):
    PROCESSING = "Processing"   # Placed, waiting for fulfilment
    SHIPPED = "Shipped"         # Handed over to the carrier
    DELIVERED = "Delivered"     # Terminal, no further transitions

    @classmethod
    def from_string(cls, value: str) -> 'OrderStatus':
        """
        Convert a client-submitted status string to OrderStatus.

        Matching is exact on the stored value; anything else is rejected so
        arbitrary strings never reach the orders table.

        Raises:
            ValueError: If value is not one of the known statuses
        """
        for status in cls:
            if status.value == value:
                return status
        valid = [s.value for s in cls]
        raise ValueError(f"Invalid order status '{value}'. Valid statuses: {', '.join(valid)}")
