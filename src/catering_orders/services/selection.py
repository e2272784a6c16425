"""Per-category selection store and its user-action handlers."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TypeVar

from catering_orders.domain.catalog import (
    OVERLAY_SOURCE_CATEGORIES,
    Catalog,
    CatalogItem,
    Category,
)
from catering_orders.domain.measurements import (
    Liters,
    Quantity,
    Size,
    Variations,
    initial_volumes,
    measurement_for,
    reset,
)
from catering_orders.domain.rows import SizeType
from catering_orders.domain.selection import AddOnSelection, SelectionEntry
from catering_orders.errors import MeasurementMismatchError, UnknownItemError
from catering_orders.services.extras import ExtrasOverlay

_M = TypeVar("_M", Quantity, Liters, Size, Variations)


def new_entry(item: CatalogItem, catalog: Catalog) -> SelectionEntry:
    """Build a zeroed, unselected entry for a catalog item."""
    return SelectionEntry(
        food_item_id=item.id,
        category=item.category,
        measurement=measurement_for(item, catalog.volumes),
        add_ons=[
            AddOnSelection(
                add_on_id=add_on.id, volumes=initial_volumes(item, catalog.volumes)
            )
            for add_on in item.add_ons
        ],
    )


@dataclass
class SelectionStore:
    """One typed collection of entries per catalog category.

    Quantity handlers keep ``selected`` derived: it is true exactly when a
    quantity field (add-ons included) is positive.
    """

    catalog: Catalog
    overlay: ExtrasOverlay | None = None
    categories: dict[Category, list[SelectionEntry]] = field(default_factory=dict)

    @classmethod
    def from_catalog(
        cls, catalog: Catalog, overlay: ExtrasOverlay | None = None
    ) -> "SelectionStore":
        """Initialize every catalog item as zero and unselected."""
        store = cls(catalog=catalog, overlay=overlay)
        for category in Category:
            store.categories[category] = [
                new_entry(item, catalog) for item in catalog.items_in(category)
            ]
        return store

    def category(self, category: Category) -> list[SelectionEntry]:
        return self.categories.get(category, [])

    def find(self, food_item_id: str) -> SelectionEntry | None:
        for entries in self.categories.values():
            for entry in entries:
                if entry.food_item_id == food_item_id:
                    return entry
        return None

    def entry(self, food_item_id: str) -> SelectionEntry:
        entry = self.find(food_item_id)
        if entry is None:
            raise UnknownItemError(food_item_id)
        return entry

    def entries(self) -> Iterator[SelectionEntry]:
        """Iterate entries in category order."""
        for category in Category:
            yield from self.category(category)

    def selected_entries(self) -> Iterator[SelectionEntry]:
        return (entry for entry in self.entries() if entry.selected)

    def toggle(self, food_item_id: str, checked: bool) -> SelectionEntry:
        """Open or close an item.

        Plain-quantity items toggle to 1/0 and size items to big=1/0; liters
        and variation items only flip ``selected``, which gates their editor.
        """
        entry = self.entry(food_item_id)
        match entry.measurement:
            case Quantity():
                entry.measurement.count = 1 if checked else 0
            case Size():
                entry.measurement.big = 1 if checked else 0
                entry.measurement.small = 0
        entry.selected = checked
        return entry

    def set_regular_quantity(self, food_item_id: str, quantity: int) -> SelectionEntry:
        entry = self.entry(food_item_id)
        measurement = _expect(entry, Quantity)
        measurement.count = _non_negative(quantity)
        return self._derive(entry)

    def set_volume_quantity(
        self, food_item_id: str, volume_id: str, quantity: int
    ) -> SelectionEntry:
        entry = self.entry(food_item_id)
        measurement = _expect(entry, Liters)
        measurement.slot(volume_id).quantity = _non_negative(quantity)
        return self._derive(entry)

    def set_size(
        self, food_item_id: str, size_type: SizeType, quantity: int
    ) -> SelectionEntry:
        entry = self.entry(food_item_id)
        measurement = _expect(entry, Size)
        if size_type == "big":
            measurement.big = _non_negative(quantity)
        else:
            measurement.small = _non_negative(quantity)
        return self._derive(entry)

    def set_variation_size(
        self,
        food_item_id: str,
        variation_id: str,
        size_type: SizeType,
        quantity: int,
    ) -> SelectionEntry:
        entry = self.entry(food_item_id)
        measurement = _expect(entry, Variations)
        slot = measurement.slot(variation_id)
        if slot is None:
            raise MeasurementMismatchError(
                f"Item {food_item_id} has no variation {variation_id}"
            )
        if size_type == "big":
            slot.size_big = _non_negative(quantity)
        else:
            slot.size_small = _non_negative(quantity)
        return self._derive(entry)

    def set_add_on_quantity(
        self, food_item_id: str, add_on_id: str, quantity: int
    ) -> SelectionEntry:
        entry = self.entry(food_item_id)
        _expect_add_on(entry, add_on_id).quantity = _non_negative(quantity)
        return self._derive(entry)

    def set_add_on_volume(
        self, food_item_id: str, add_on_id: str, volume_id: str, quantity: int
    ) -> SelectionEntry:
        entry = self.entry(food_item_id)
        add_on = _expect_add_on(entry, add_on_id)
        add_on.volume(volume_id).quantity = _non_negative(quantity)
        return self._derive(entry)

    def set_note(self, food_item_id: str, note: str) -> SelectionEntry:
        entry = self.entry(food_item_id)
        entry.note = note
        return entry

    def set_preparation(
        self, food_item_id: str, preparation_id: str | None
    ) -> SelectionEntry:
        """Set or clear the preparation, resolving its display name."""
        entry = self.entry(food_item_id)
        if preparation_id is None:
            entry.preparation_id = None
            entry.preparation_name = None
            return entry
        item = self.catalog.item(food_item_id)
        preparation = item.preparation(preparation_id) if item else None
        entry.preparation_id = preparation_id
        entry.preparation_name = preparation.name if preparation else None
        return entry

    def set_price(self, food_item_id: str, price: float | None) -> SelectionEntry:
        """Set the price of an extras-category item."""
        entry = self.entry(food_item_id)
        if entry.category != Category.EXTRAS:
            raise MeasurementMismatchError(
                f"Only extras-category items carry a price, not {entry.category}"
            )
        entry.price = price
        return entry

    def cancel(self, food_item_id: str) -> SelectionEntry:
        """Clear an item completely, cascading into the extras overlay."""
        entry = self.entry(food_item_id)
        reset(entry.measurement)
        for add_on in entry.add_ons:
            add_on.quantity = 0
            for volume in add_on.volumes:
                volume.quantity = 0
        entry.preparation_id = None
        entry.preparation_name = None
        entry.note = ""
        entry.price = None
        entry.selected = False
        if self.overlay is not None and entry.category in OVERLAY_SOURCE_CATEGORIES:
            self.overlay.remove_for_source(food_item_id)
        return entry

    def rederive_selected(self) -> list[str]:
        """Recompute every ``selected`` flag; return ids whose flag changed."""
        changed: list[str] = []
        for entry in self.entries():
            derived = entry.has_quantity()
            if entry.selected != derived:
                changed.append(entry.food_item_id)
                entry.selected = derived
        return changed

    def _derive(self, entry: SelectionEntry) -> SelectionEntry:
        entry.selected = entry.has_quantity()
        return entry


def _expect(entry: SelectionEntry, kind: type[_M]) -> _M:
    if not isinstance(entry.measurement, kind):
        raise MeasurementMismatchError(
            f"Item {entry.food_item_id} is not measured by {kind.__name__.lower()}"
        )
    return entry.measurement


def _expect_add_on(entry: SelectionEntry, add_on_id: str) -> AddOnSelection:
    add_on = entry.add_on(add_on_id)
    if add_on is None:
        raise MeasurementMismatchError(
            f"Item {entry.food_item_id} has no add-on {add_on_id}"
        )
    return add_on


def _non_negative(quantity: int) -> int:
    if quantity < 0:
        raise ValueError(f"Quantity cannot be negative: {quantity}")
    return quantity
