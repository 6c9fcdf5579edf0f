"""Exceptions for django-bundle-orders."""


class OrderError(Exception):
    """Base exception for order errors."""
    pass


class OrderNotFoundError(OrderError):
    """Requested order does not exist."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Order not found: {identifier}")


class InvalidStatusTransitionError(OrderError):
    """Raised when a status change would break the forward-only lifecycle."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move order from {current} to {target}")


class UnknownCategoryError(OrderError):
    """Service category is not one of ServiceCategory."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown service category: {category}")


class InsufficientBalanceError(OrderError):
    """Shop withdrawal exceeds the available balance."""
    pass


class WebhookNotAcceptedError(OrderError):
    """Status pushes are only taken from suppliers that cannot be polled."""

    def __init__(self, supplier: str):
        self.supplier = supplier
        super().__init__(f"Webhooks are not accepted for supplier: {supplier}")
