"""Rebuilding editor state from persisted rows."""

import logging
from dataclasses import dataclass, field

from catering_orders.domain.catalog import Catalog
from catering_orders.domain.extras import ExtraItem, ExtraVariation
from catering_orders.domain.rows import PersistedExtraRow, PersistedRow
from catering_orders.errors import ReconciliationWarning
from catering_orders.services.extras import ExtrasOverlay
from catering_orders.services.measurement import place_quantity, route_row
from catering_orders.services.selection import SelectionStore

logger = logging.getLogger(__name__)


@dataclass
class Reconciliation:
    """Rebuilt stores plus everything that could not be applied cleanly."""

    store: SelectionStore
    overlay: ExtrasOverlay
    warnings: list[ReconciliationWarning] = field(default_factory=list)


@dataclass
class OrderReconciler:
    """Inverse of the serializer: routes each row into its nested slot."""

    catalog: Catalog

    def reconcile(
        self,
        rows: list[PersistedRow],
        extra_rows: list[PersistedExtraRow] | None = None,
    ) -> Reconciliation:
        overlay = ExtrasOverlay()
        store = SelectionStore.from_catalog(self.catalog, overlay=overlay)
        result = Reconciliation(store=store, overlay=overlay)

        for row in rows:
            self._apply_row(result, row)
        for extra_row in extra_rows or []:
            overlay.restore(restore_extra(extra_row))

        for food_item_id in store.rederive_selected():
            self._warn(
                result,
                food_item_id,
                "selected flag disagreed with quantities and was re-derived",
            )
        return result

    def _apply_row(self, result: Reconciliation, row: PersistedRow) -> None:
        item = self.catalog.item(row.food_item_id)
        if item is None:
            self._warn(result, row.food_item_id, "row references an unknown item")
            return
        entry = result.store.find(row.food_item_id)
        if entry is None:
            self._warn(
                result, row.food_item_id, f"item is not offered in {item.category}"
            )
            return

        routing = route_row(row, item)
        if routing.fallback:
            self._warn(result, row.food_item_id, routing.fallback, level=logging.INFO)
        if not place_quantity(entry, routing.target, row.quantity):
            self._warn(
                result,
                row.food_item_id,
                f"row slot {type(routing.target).__name__} does not fit the item",
            )
            return

        entry.selected = True
        if row.preparation_id:
            preparation = item.preparation(row.preparation_id)
            entry.preparation_id = row.preparation_id
            entry.preparation_name = preparation.name if preparation else None
        if row.note:
            entry.note = row.note
        if row.price is not None:
            entry.price = row.price

    @staticmethod
    def _warn(
        result: Reconciliation,
        food_item_id: str,
        reason: str,
        level: int = logging.WARNING,
    ) -> None:
        logger.log(level, "Reconciling item %s: %s", food_item_id, reason)
        result.warnings.append(
            ReconciliationWarning(food_item_id=food_item_id, reason=reason)
        )


def restore_extra(row: PersistedExtraRow) -> ExtraItem:
    return ExtraItem(
        id=row.id,
        source_food_item_id=row.source_food_item_id,
        source_category=row.source_category,
        name=row.name,
        price=row.price,
        quantity=row.quantity,
        size_big=row.size_big,
        size_small=row.size_small,
        variations=[
            ExtraVariation(
                variation_id=v.variation_id,
                name=v.name,
                size_big=v.size_big,
                size_small=v.size_small,
            )
            for v in row.variations
        ]
        or None,
        note=row.note,
        preparation_name=row.preparation_name,
    )
