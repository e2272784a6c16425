"""Flattening of editor state into persisted rows."""

from dataclasses import dataclass

from catering_orders.domain.catalog import Category
from catering_orders.domain.extras import ExtraItem
from catering_orders.domain.measurements import Liters, Quantity, Size, Variations
from catering_orders.domain.rows import (
    PersistedExtraRow,
    PersistedExtraVariation,
    PersistedRow,
    SizeType,
)
from catering_orders.domain.selection import SelectionEntry
from catering_orders.services.extras import ExtrasOverlay
from catering_orders.services.selection import SelectionStore


@dataclass
class _ItemRows:
    """Collects rows for one item, attaching note and price to the first."""

    entry: SelectionEntry
    rows: list[PersistedRow]

    def emit(  # noqa: PLR0913
        self,
        quantity: int,
        volume_id: str | None = None,
        size_type: SizeType | None = None,
        variation_id: str | None = None,
        add_on_id: str | None = None,
    ) -> None:
        if quantity <= 0:
            return
        first = not self.rows
        self.rows.append(
            PersistedRow(
                food_item_id=self.entry.food_item_id,
                quantity=quantity,
                volume_id=volume_id,
                size_type=size_type,
                variation_id=variation_id,
                add_on_id=add_on_id,
                preparation_id=self.entry.preparation_id,
                note=(self.entry.note or None) if first else None,
                price=self._price() if first else None,
            )
        )

    def _price(self) -> float | None:
        if self.entry.category != Category.EXTRAS:
            return None
        return self.entry.price


class OrderSerializer:
    """Turns a selection store and extras overlay into boundary rows."""

    def serialize(
        self, store: SelectionStore, overlay: ExtrasOverlay | None = None
    ) -> tuple[list[PersistedRow], list[PersistedExtraRow]]:
        rows: list[PersistedRow] = []
        for entry in store.selected_entries():
            rows.extend(serialize_entry(entry))
        extra_rows = [serialize_extra(e) for e in overlay.entries] if overlay else []
        return rows, extra_rows


def serialize_entry(entry: SelectionEntry) -> list[PersistedRow]:
    """Rows for one entry; the note rides on the first row only."""
    collector = _ItemRows(entry=entry, rows=[])
    measurement = entry.measurement
    match measurement:
        case Liters(volumes=volumes):
            for volume in volumes:
                collector.emit(volume.quantity, volume_id=volume.volume_id)
        case Size(big=big, small=small):
            collector.emit(big, size_type="big")
            collector.emit(small, size_type="small")
        case Variations(variations=variations):
            for variation in variations:
                collector.emit(
                    variation.size_big,
                    size_type="big",
                    variation_id=variation.variation_id,
                )
                collector.emit(
                    variation.size_small,
                    size_type="small",
                    variation_id=variation.variation_id,
                )
        case Quantity(count=count):
            collector.emit(count)

    for add_on in entry.add_ons:
        collector.emit(add_on.quantity, add_on_id=add_on.add_on_id)
        for volume in add_on.volumes:
            collector.emit(
                volume.quantity, volume_id=volume.volume_id, add_on_id=add_on.add_on_id
            )
    return collector.rows


def serialize_extra(entry: ExtraItem) -> PersistedExtraRow:
    return PersistedExtraRow(
        id=entry.id,
        source_food_item_id=entry.source_food_item_id,
        source_category=entry.source_category,
        name=entry.name,
        price=entry.price,
        quantity=entry.quantity,
        size_big=entry.size_big,
        size_small=entry.size_small,
        variations=tuple(
            PersistedExtraVariation(
                variation_id=v.variation_id,
                name=v.name,
                size_big=v.size_big,
                size_small=v.size_small,
            )
            for v in entry.variations or []
        ),
        note=entry.note,
        preparation_name=entry.preparation_name,
    )
