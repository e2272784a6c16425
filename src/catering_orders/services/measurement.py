"""Routing of persisted rows into the in-memory measurement model."""

from dataclasses import dataclass

from catering_orders.domain.catalog import CatalogItem, MeasurementType
from catering_orders.domain.measurements import Liters, Quantity, Size, Variations
from catering_orders.domain.rows import (
    AddOnQuantityTarget,
    AddOnVolumeTarget,
    PersistedRow,
    RegularTarget,
    RowTarget,
    SizeTarget,
    VariationTarget,
    VolumeTarget,
)
from catering_orders.domain.selection import SelectionEntry


@dataclass(frozen=True)
class Routing:
    """Where a row's quantity goes, plus the fallback applied, if any."""

    target: RowTarget
    fallback: str | None = None


def route_row(row: PersistedRow, item: CatalogItem) -> Routing:
    """Decide the slot for a row from its discriminator columns.

    Precedence: add-on, variation, volume, size, then plain quantity.
    """
    if row.add_on_id:
        if row.volume_id:
            return Routing(AddOnVolumeTarget(row.add_on_id, row.volume_id))
        return Routing(AddOnQuantityTarget(row.add_on_id))
    if row.variation_id:
        if row.size_type is None:
            return Routing(
                VariationTarget(row.variation_id, "big"),
                fallback="variation row without size type stored as big",
            )
        return Routing(VariationTarget(row.variation_id, row.size_type))
    if row.volume_id:
        return Routing(VolumeTarget(row.volume_id))
    if row.size_type in ("big", "small"):
        return Routing(SizeTarget(row.size_type))
    if (
        item.measurement_type == MeasurementType.SIZE
        and not item.variations
        and row.quantity > 0
    ):
        return Routing(
            SizeTarget("big"),
            fallback="size item row without size type stored as big",
        )
    return Routing(RegularTarget())


def place_quantity(entry: SelectionEntry, target: RowTarget, quantity: int) -> bool:
    """Add ``quantity`` to the slot named by ``target``.

    Returns False when the slot does not exist for the entry's measurement,
    leaving the entry untouched.
    """
    measurement = entry.measurement
    match target:
        case AddOnVolumeTarget(add_on_id=add_on_id, volume_id=volume_id):
            add_on = entry.add_on(add_on_id)
            if add_on is None:
                return False
            add_on.volume(volume_id).quantity += quantity
            return True
        case AddOnQuantityTarget(add_on_id=add_on_id):
            add_on = entry.add_on(add_on_id)
            if add_on is None:
                return False
            add_on.quantity += quantity
            return True
        case VariationTarget(variation_id=variation_id, size_type=size_type):
            if not isinstance(measurement, Variations):
                return False
            slot = measurement.slot(variation_id)
            if slot is None:
                return False
            if size_type == "small":
                slot.size_small += quantity
            else:
                slot.size_big += quantity
            return True
        case VolumeTarget(volume_id=volume_id):
            if not isinstance(measurement, Liters):
                return False
            measurement.slot(volume_id).quantity += quantity
            return True
        case SizeTarget(size_type=size_type):
            if not isinstance(measurement, Size):
                return False
            if size_type == "big":
                measurement.big += quantity
            else:
                measurement.small += quantity
            return True
        case RegularTarget():
            if not isinstance(measurement, Quantity):
                return False
            measurement.count += quantity
            return True
    return False
