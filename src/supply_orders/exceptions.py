"""
Exception types raised inside the order modules.

They never cross an operation boundary: submission, receiving and catalog
operations convert them into result objects for the caller.
"""


class OrderSystemError(Exception):
    """Base class for supply order errors."""


class ValidationFailure(OrderSystemError):
    """Input rejected before any network call (empty cart, unknown requester...)."""


class RenderError(OrderSystemError):
    """PDF or QR code generation failed for an order group."""

    def __init__(self, order_id: str, message: str):
        super().__init__(f"{order_id}: {message}")
        self.order_id = order_id
