"""Domain errors for the orders module."""

from uuid import UUID

from core.domain.errors import ConflictError, ErrorCode, NotFoundError


class OrderNotFoundError(NotFoundError):
    """Raised when an order is not found."""

    def __init__(self, order_id: UUID | str) -> None:
        super().__init__(code=ErrorCode.ORDER_NOT_FOUND, message="Order not found")
        self.order_id = order_id


class PaymentReferenceExistsError(ConflictError):
    """Raised when an order already carries a payment reference."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_REFERENCE_EXISTS,
            message="Order already has a payment reference attached",
        )
