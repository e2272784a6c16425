"""Per-category selection entries held by an order editor."""

from dataclasses import dataclass, field

from catering_orders.domain.catalog import Category
from catering_orders.domain.measurements import (
    Measurement,
    VolumeQuantity,
    has_quantity,
)


@dataclass
class AddOnSelection:
    """Quantities picked for a salad add-on."""

    add_on_id: str
    quantity: int = 0
    volumes: list[VolumeQuantity] = field(default_factory=list)

    def volume(self, volume_id: str) -> VolumeQuantity:
        for volume in self.volumes:
            if volume.volume_id == volume_id:
                return volume
        volume = VolumeQuantity(volume_id=volume_id)
        self.volumes.append(volume)
        return volume

    def has_quantity(self) -> bool:
        return self.quantity > 0 or any(v.quantity > 0 for v in self.volumes)


@dataclass
class SelectionEntry:
    """Editor state for one catalog item within an order."""

    food_item_id: str
    category: Category
    measurement: Measurement
    selected: bool = False
    add_ons: list[AddOnSelection] = field(default_factory=list)
    preparation_id: str | None = None
    preparation_name: str | None = None
    note: str = ""
    price: float | None = None

    def add_on(self, add_on_id: str) -> AddOnSelection | None:
        return next((a for a in self.add_ons if a.add_on_id == add_on_id), None)

    def has_quantity(self) -> bool:
        """Whether any quantity field, add-ons included, is positive."""
        return has_quantity(self.measurement) or any(
            add_on.has_quantity() for add_on in self.add_ons
        )
