"""Folding linked add-on selections into another catalog item."""

import logging
from dataclasses import dataclass, field

from catering_orders.domain.measurements import Liters, Quantity, Size
from catering_orders.domain.selection import SelectionEntry
from catering_orders.errors import MeasurementMismatchError
from catering_orders.services.selection import SelectionStore

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = " | "
NOTE_PREFIX = "תוספת מ-"


@dataclass(frozen=True)
class ImplicitPairings:
    """Source/linked item pairs whose merge adds no note."""

    pairs: frozenset[tuple[str, str]] = frozenset()

    def suppresses_note(self, source_item_id: str, linked_item_id: str) -> bool:
        return (source_item_id, linked_item_id) in self.pairs


@dataclass(frozen=True)
class LinkedPayload:
    """Partial selection carried over from an add-on."""

    quantity: int = 0
    volumes: tuple[tuple[str, int], ...] = field(default=())

    def is_empty(self) -> bool:
        return self.quantity <= 0 and not any(qty > 0 for _, qty in self.volumes)


@dataclass
class AddOnLinker:
    """Merges a companion add-on's quantities into its linked item."""

    pairings: ImplicitPairings = field(default_factory=ImplicitPairings)

    def merge_add_on(
        self,
        store: SelectionStore,
        parent_item_id: str,
        add_on_id: str,
        payload: LinkedPayload,
    ) -> SelectionEntry:
        """Resolve an add-on's linked item from the catalog and merge into it."""
        parent = store.catalog.item(parent_item_id)
        add_on = parent.add_on(add_on_id) if parent else None
        if parent is None or add_on is None or not add_on.linked_food_item_id:
            raise MeasurementMismatchError(
                f"Add-on {add_on_id} of {parent_item_id} is not linked to an item"
            )
        return self.merge(
            store,
            linked_item_id=add_on.linked_food_item_id,
            payload=payload,
            source_item_id=parent.id,
            source_name=parent.name,
        )

    def merge(
        self,
        store: SelectionStore,
        linked_item_id: str,
        payload: LinkedPayload,
        source_item_id: str,
        source_name: str,
    ) -> SelectionEntry:
        """Fold ``payload`` into the linked item and annotate its note."""
        entry = store.entry(linked_item_id)
        entry.selected = True
        if payload.is_empty():
            return entry
        linked = store.catalog.item(linked_item_id)
        measurement = entry.measurement

        if payload.volumes:
            if isinstance(measurement, Liters):
                for volume_id, qty in payload.volumes:
                    if qty > 0:
                        measurement.slot(volume_id).quantity += qty
            else:
                logger.info(
                    "Linked item %s is not measured by volume; volumes kept in note",
                    linked_item_id,
                )
        if payload.quantity > 0:
            if isinstance(measurement, Quantity):
                measurement.count += payload.quantity
            elif isinstance(measurement, Size):
                measurement.big += payload.quantity
                logger.info(
                    "Linked quantity for size item %s stored as big", linked_item_id
                )
            else:
                logger.info(
                    "Linked item %s has no plain quantity; quantity kept in note",
                    linked_item_id,
                )

        if not self.pairings.suppresses_note(source_item_id, linked_item_id):
            quantities = self._format(store, linked_item_id, payload)
            fragment = f"{NOTE_PREFIX}{source_name}: {quantities}"
            entry.note = (
                f"{entry.note}{NOTE_SEPARATOR}{fragment}" if entry.note else fragment
            )
        logger.info(
            "Merged add-on from %s into %s",
            source_item_id,
            linked.name if linked else linked_item_id,
        )
        return entry

    @staticmethod
    def _format(store: SelectionStore, item_id: str, payload: LinkedPayload) -> str:
        item = store.catalog.item(item_id)
        parts = [
            f"{store.catalog.volume_label(volume_id, item)}:{qty}"
            for volume_id, qty in payload.volumes
            if qty > 0
        ]
        if payload.quantity > 0:
            parts.append(f"×{payload.quantity}")
        return " ".join(parts)
