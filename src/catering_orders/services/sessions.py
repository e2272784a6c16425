"""Order edit session: the state owned by one open editor."""

import logging
from dataclasses import dataclass, field

from catering_orders.domain.catalog import Catalog
from catering_orders.domain.extras import ExtraItem, ExtraPayload
from catering_orders.domain.orders import CustomerFields, PricingFields
from catering_orders.domain.selection import SelectionEntry
from catering_orders.errors import (
    ReconciliationWarning,
    SessionClosedError,
    UnknownItemError,
)
from catering_orders.services.addons import AddOnLinker, LinkedPayload
from catering_orders.services.extras import ExtrasOverlay
from catering_orders.services.pricing import calculate_total
from catering_orders.services.reconciler import Reconciliation
from catering_orders.services.selection import SelectionStore

logger = logging.getLogger(__name__)


@dataclass
class OrderSession:
    """Selection, overlay and scalar fields for one editor.

    A session is created when an editor opens and closed when it is saved
    or discarded; a closed session rejects further access to its stores.
    """

    catalog: Catalog
    _store: SelectionStore
    _overlay: ExtrasOverlay
    linker: AddOnLinker = field(default_factory=AddOnLinker)
    customer: CustomerFields = field(default_factory=CustomerFields)
    pricing: PricingFields = field(default_factory=PricingFields)
    order_id: str | None = None
    order_number: int | None = None
    warnings: list[ReconciliationWarning] = field(default_factory=list)
    closed: bool = False

    @classmethod
    def new(cls, catalog: Catalog, linker: AddOnLinker | None = None) -> "OrderSession":
        """Open an editor for a new order."""
        overlay = ExtrasOverlay()
        return cls(
            catalog=catalog,
            _store=SelectionStore.from_catalog(catalog, overlay=overlay),
            _overlay=overlay,
            linker=linker or AddOnLinker(),
        )

    @classmethod
    def from_reconciliation(  # noqa: PLR0913
        cls,
        catalog: Catalog,
        reconciliation: Reconciliation,
        customer: CustomerFields,
        pricing: PricingFields,
        order_id: str,
        order_number: int | None,
        linker: AddOnLinker | None = None,
    ) -> "OrderSession":
        """Open an editor over a loaded order."""
        return cls(
            catalog=catalog,
            _store=reconciliation.store,
            _overlay=reconciliation.overlay,
            linker=linker or AddOnLinker(),
            customer=customer,
            pricing=pricing,
            order_id=order_id,
            order_number=order_number,
            warnings=list(reconciliation.warnings),
        )

    @property
    def selection(self) -> SelectionStore:
        self._require_open()
        return self._store

    @property
    def extras(self) -> ExtrasOverlay:
        self._require_open()
        return self._overlay

    def add_extra(
        self,
        food_item_id: str,
        payload: ExtraPayload,
        price: float,
        note: str | None = None,
    ) -> ExtraItem:
        """Add a catalog item as an extra without touching its selection."""
        item = self.catalog.item(food_item_id)
        if item is None:
            raise UnknownItemError(food_item_id)
        entry = self.selection.find(food_item_id)
        return self.extras.add(
            source_category=item.category,
            food_item_id=food_item_id,
            payload=payload,
            price=price,
            name=item.name,
            preparation_name=entry.preparation_name if entry else None,
            note=note,
        )

    def merge_linked_add_on(
        self, parent_item_id: str, add_on_id: str, payload: LinkedPayload
    ) -> SelectionEntry:
        """Fold a linked add-on's quantities into its target item."""
        return self.linker.merge_add_on(
            self.selection, parent_item_id, add_on_id, payload
        )

    def total(self) -> float | None:
        """Current payable total, recomputed on every call."""
        return calculate_total(self.pricing, self.extras, self.selection)

    def close(self) -> None:
        if not self.closed:
            logger.info("Closing order session for %s", self.order_id or "new order")
        self.closed = True

    def _require_open(self) -> None:
        if self.closed:
            raise SessionClosedError("Order session is closed")
