"""Error types raised by the order engine."""

from dataclasses import dataclass


class CateringOrdersError(Exception):
    """Base class for order engine errors."""


class ValidationError(CateringOrdersError):
    """A required order field is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class BoundaryError(CateringOrdersError, RuntimeError):
    """The persistence boundary failed; the message is surfaced verbatim."""


class SessionClosedError(CateringOrdersError):
    """An edit session was used after it was saved or discarded."""


class UnknownItemError(CateringOrdersError, KeyError):
    """A handler addressed an item that is not part of the selection."""

    def __init__(self, food_item_id: str) -> None:
        super().__init__(food_item_id)
        self.food_item_id = food_item_id

    def __str__(self) -> str:
        return f"Unknown food item: {self.food_item_id}"


@dataclass(frozen=True)
class ReconciliationWarning:
    """A persisted row that was dropped or reinterpreted on load."""

    food_item_id: str
    reason: str


class MeasurementMismatchError(CateringOrdersError, ValueError):
    """A handler addressed a slot the item's measurement does not have."""


class OrderNotFoundError(CateringOrdersError, LookupError):
    """An update addressed an order that does not exist."""
