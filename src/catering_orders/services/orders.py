"""Order orchestration: open, load, validate and persist edit sessions."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from catering_orders.domain.catalog import Catalog
from catering_orders.domain.orders import (
    OrderDraft,
    OrderStatus,
    OrderSummary,
    SaveResult,
    StoredOrder,
)
from catering_orders.errors import ValidationError
from catering_orders.services.addons import AddOnLinker
from catering_orders.services.cache import Cache, InMemoryCache
from catering_orders.services.reconciler import OrderReconciler
from catering_orders.services.serializer import OrderSerializer
from catering_orders.services.sessions import OrderSession

logger = logging.getLogger(__name__)

_CATALOG_CACHE_KEY = "catalog"


class OrderRepository(Protocol):
    """Persistence boundary for orders."""

    def load_order(self, order_id: str) -> StoredOrder | None:
        """Return the stored order with its rows, if present."""

    def save_order(self, draft: OrderDraft) -> SaveResult:
        """Persist a new order and return its identifiers."""

    def update_order(self, order_id: str, draft: OrderDraft) -> SaveResult:
        """Replace an existing order's fields and rows.

        Raises ``OrderNotFoundError`` when no order has the id.
        """

    def find_orders_by_phone(self, phone: str) -> list[OrderSummary]:
        """Return the orders of the customer with this phone, newest first."""

    def list_orders(self, date_from: str, date_to: str) -> list[OrderSummary]:
        """Return orders dated within the inclusive range, earliest first."""

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Set an order's status; raises ``OrderNotFoundError`` if missing."""


class CatalogRepository(Protocol):
    """Source of catalog descriptors and global volume labels."""

    def load_catalog(self) -> Catalog:
        """Return the active catalog."""


@dataclass
class OrderService:
    """Application service wrapping the order engine and its boundaries."""

    repository: OrderRepository
    catalog_repository: CatalogRepository
    linker: AddOnLinker = field(default_factory=AddOnLinker)
    serializer: OrderSerializer = field(default_factory=OrderSerializer)
    cache: Cache = field(default_factory=InMemoryCache)
    catalog_ttl_seconds: int = 300

    def catalog(self) -> Catalog:
        """Return the catalog, served from cache while fresh."""
        cached = self.cache.get(_CATALOG_CACHE_KEY)
        if isinstance(cached, Catalog):
            return cached
        catalog = self.catalog_repository.load_catalog()
        self.cache.set(_CATALOG_CACHE_KEY, catalog, self.catalog_ttl_seconds)
        return catalog

    def open_new(self) -> OrderSession:
        """Open an editor for a new order."""
        return OrderSession.new(self.catalog(), linker=self.linker)

    async def open_existing(self, order_id: str) -> OrderSession | None:
        """Open an editor over a stored order."""
        return await self.load(order_id)

    async def load(self, order_id: str) -> OrderSession | None:
        """Load an order and rebuild its editor state; None when not found."""
        stored = self.repository.load_order(order_id)
        if stored is None:
            logger.info("Order %s not found", order_id)
            return None
        catalog = self.catalog()
        reconciliation = OrderReconciler(catalog).reconcile(
            stored.rows, stored.extra_rows
        )
        reconciliation.warnings[:0] = stored.warnings
        if reconciliation.warnings:
            logger.warning(
                "Order %s loaded with %d reconciliation warning(s)",
                order_id,
                len(reconciliation.warnings),
            )
        return OrderSession.from_reconciliation(
            catalog,
            reconciliation,
            customer=stored.customer,
            pricing=stored.pricing,
            order_id=stored.id,
            order_number=stored.order_number,
            linker=self.linker,
        )

    def build_draft(self, session: OrderSession) -> OrderDraft:
        """Validate the session and flatten it into boundary rows."""
        validate(session)
        rows, extra_rows = self.serializer.serialize(session.selection, session.extras)
        return OrderDraft(
            customer=session.customer,
            pricing=session.pricing,
            rows=rows,
            extra_rows=extra_rows,
        )

    async def save(self, session: OrderSession) -> SaveResult:
        """Persist a session: create for new orders, update for loaded ones."""
        if session.order_id is not None:
            return await self.update(session.order_id, session)
        draft = self.build_draft(session)
        result = self.repository.save_order(draft)
        logger.info(
            "Saved order %s with %d row(s) and %d extra(s)",
            result.order_number or result.order_id,
            len(draft.rows),
            len(draft.extra_rows),
        )
        session.order_id = result.order_id
        session.order_number = result.order_number
        session.close()
        return result

    async def update(self, order_id: str, session: OrderSession) -> SaveResult:
        """Replace an existing order with the session's state."""
        draft = self.build_draft(session)
        result = self.repository.update_order(order_id, draft)
        logger.info("Updated order %s with %d row(s)", order_id, len(draft.rows))
        session.close()
        return result

    def discard(self, session: OrderSession) -> None:
        """Close an editor without persisting anything."""
        session.close()

    async def find_by_phone(self, phone: str) -> list[OrderSummary]:
        """Find a customer's orders to reopen for editing."""
        phone = phone.strip()
        if not phone:
            raise ValidationError("phone", "Phone number is required")
        return self.repository.find_orders_by_phone(phone)

    async def list_orders(self, date_from: str, date_to: str) -> list[OrderSummary]:
        """List orders whose date falls within ``date_from``..``date_to``."""
        if not date_from or not date_to:
            raise ValidationError("date_from", "Both dates are required")
        if date_from > date_to:
            raise ValidationError("date_to", "End date is before start date")
        return self.repository.list_orders(date_from, date_to)

    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Move an order to another lifecycle status."""
        self.repository.update_status(order_id, status)
        logger.info("Order %s marked %s", order_id, status.value)


def validate(session: OrderSession) -> None:
    """Reject sessions missing required scalar fields."""
    if not session.customer.phone.strip():
        raise ValidationError("phone", "Phone number is required")
