"""
Order State Machine for validating order status transitions.

Statuses form a closed set; only the transitions listed in VALID_TRANSITIONS
may be persisted. Delivered is terminal.
"""

import logging

from enums.order_status import OrderStatus

logger = logging.getLogger(__name__)


class OrderStatusTransition:
    """Represents a valid status transition with metadata"""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus, description: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.description = description

    def __repr__(self):
        return f"{self.from_status.value} -> {self.to_status.value}"


class OrderStateMachine:
    """
    Finite state machine for order status transitions.

    Valid status transitions:
    - PROCESSING -> SHIPPED
    - SHIPPED -> DELIVERED (stamps delivered_at)

    DELIVERED is final; re-setting the current status is not a transition.
    """

    VALID_TRANSITIONS: list[OrderStatusTransition] = [
        OrderStatusTransition(
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            description="Order handed over to the carrier"
        ),
        OrderStatusTransition(
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            description="Order delivered to the customer"
        ),
    ]

    _transition_map: dict[OrderStatus, set[OrderStatus]] = {}
    _transition_descriptions: dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        if cls._transition_map:
            return

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_status, set()).add(transition.to_status)
            cls._transition_descriptions[(transition.from_status, transition.to_status)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        cls._build_transition_map()
        return to_status in cls._transition_map.get(from_status, set())

    @classmethod
    def is_final_status(cls, status: OrderStatus) -> bool:
        return status == OrderStatus.DELIVERED

    @classmethod
    def validate_and_log_transition(cls, order_id: int, from_status: OrderStatus, to_status: OrderStatus,
                                    admin_id: int | None = None) -> bool:
        """
        Validate a status transition and write an audit log line.

        Returns:
            True if transition is valid and logged, False otherwise
        """
        if not cls.is_valid_transition(from_status, to_status):
            logger.warning(f"Invalid status transition for order {order_id}: "
                           f"{from_status.value} -> {to_status.value}")
            return False

        description = cls._transition_descriptions.get((from_status, to_status), "")
        performer = f"admin {admin_id}" if admin_id else "system"
        logger.info(f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} "
                    f"by {performer}: {description}")
        return True
