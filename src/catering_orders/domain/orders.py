"""Order-level scalar fields and boundary payloads."""

from dataclasses import dataclass, field
from enum import StrEnum

from catering_orders.domain.rows import PersistedExtraRow, PersistedRow
from catering_orders.errors import ReconciliationWarning


class OrderStatus(StrEnum):
    """Lifecycle status stored on an order."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class CustomerFields:
    """Customer and delivery details captured by the editor."""

    name: str = ""
    phone: str = ""
    phone_alt: str = ""
    address: str = ""
    order_date: str = ""
    order_time: str = ""
    customer_time: str = ""
    delivery_address: str = ""
    notes: str = ""


@dataclass
class PricingFields:
    """Scalars the payable total is derived from."""

    total_portions: int | None = None
    price_per_portion: float | None = None
    delivery_fee: float | None = None


@dataclass(frozen=True)
class StoredOrder:
    """Order as returned by the persistence boundary.

    ``warnings`` lists stored rows the boundary could not parse and left out.
    """

    id: str
    order_number: int | None
    customer: CustomerFields
    pricing: PricingFields
    rows: list[PersistedRow]
    extra_rows: list[PersistedExtraRow]
    status: OrderStatus = OrderStatus.ACTIVE
    warnings: list[ReconciliationWarning] = field(default_factory=list)


@dataclass(frozen=True)
class OrderSummary:
    """Order header used to find an order to reopen."""

    id: str
    order_number: int | None
    status: OrderStatus
    order_date: str
    order_time: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    delivery_address: str = ""


@dataclass(frozen=True)
class OrderDraft:
    """Flattened order handed to the persistence boundary."""

    customer: CustomerFields
    pricing: PricingFields
    rows: list[PersistedRow] = field(default_factory=list)
    extra_rows: list[PersistedExtraRow] = field(default_factory=list)


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save or update."""

    order_id: str
    order_number: int | None = None
