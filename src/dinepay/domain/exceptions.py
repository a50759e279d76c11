"""Domain-level exceptions.

All recoverable business rule violations are expressed as subclasses of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.  ``InvariantViolation`` is deliberately *not* a
DomainException: it signals a defect, not a user error.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderNotFoundError(EntityNotFoundError):
    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order {order_number} not found")
        self.order_number = order_number


class MenuItemNotFoundError(EntityNotFoundError):
    def __init__(self, menu_item_id: str) -> None:
        super().__init__(f"Menu item '{menu_item_id}' not found")
        self.menu_item_id = menu_item_id


class InvoiceNotFoundError(EntityNotFoundError):
    def __init__(self, order_number: str) -> None:
        super().__init__(f"No invoice issued for order {order_number}")
        self.order_number = order_number


class OrderLineNotFoundError(EntityNotFoundError):
    def __init__(self, order_number: str, menu_item_id: str) -> None:
        super().__init__(
            f"Menu item '{menu_item_id}' is not on order {order_number}"
        )
        self.order_number = order_number
        self.menu_item_id = menu_item_id


class CartItemNotFoundError(EntityNotFoundError):
    def __init__(self, menu_item_id: str) -> None:
        super().__init__(f"Menu item '{menu_item_id}' is not in the cart")
        self.menu_item_id = menu_item_id


class MenuItemUnavailableError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Menu item '{name}' is currently unavailable")
        self.name = name


class InvalidTransitionError(DomainException):
    """A status change outside the order lifecycle table was requested."""

    def __init__(self, current: str, attempted: str) -> None:
        super().__init__(
            f"Cannot move order from {current} via {attempted}"
        )
        self.current = current
        self.attempted = attempted


class OrderNotEditableError(DomainException):
    """Line items can only change while the order is PENDING."""

    def __init__(self, order_number: str, status: str) -> None:
        super().__init__(
            f"Order {order_number} is {status}; its items can no longer be changed"
        )
        self.order_number = order_number
        self.status = status


# --- Settlement outcomes -----------------------------------------------------


class SettlementError(DomainException):
    """Base class for payment settlement failures."""


class InsufficientPaymentError(SettlementError):
    def __init__(self, tendered, amount_due) -> None:
        super().__init__(
            f"Tendered {tendered} is less than the amount due {amount_due}"
        )
        self.tendered = tendered
        self.amount_due = amount_due


class PaymentDeclinedError(SettlementError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment declined: {reason}")
        self.reason = reason


class AlreadySettledError(SettlementError):
    """Someone else already paid for this order."""

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order {order_number} has already been paid")
        self.order_number = order_number


# --- Invoicing ---------------------------------------------------------------


class OrderNotPaidError(DomainException):
    def __init__(self, order_number: str) -> None:
        super().__init__(
            f"Order {order_number} is not paid; an invoice cannot be issued"
        )
        self.order_number = order_number


class InvoiceIssuanceError(DomainException):
    """Payment was recorded but the invoice could not be issued."""


# --- Storage -----------------------------------------------------------------


class ConcurrencyConflictError(DomainException):
    """Lost a race at the storage boundary; retry the whole operation."""


class InvariantViolation(Exception):
    """An internal invariant was broken. This is a bug, not a user error."""
