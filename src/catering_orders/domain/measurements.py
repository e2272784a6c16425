"""Measurement model: one quantity representation per catalog item."""

from dataclasses import dataclass, field

from catering_orders.domain.catalog import CatalogItem, MeasurementType, VolumeLabel


@dataclass
class VolumeQuantity:
    """Quantity ordered for one volume option."""

    volume_id: str
    quantity: int = 0


@dataclass
class VariationQuantity:
    """Big/small counts for one item variation."""

    variation_id: str
    size_big: int = 0
    size_small: int = 0


@dataclass
class Quantity:
    """Plain discrete count."""

    count: int = 0


@dataclass
class Liters:
    """Per-volume quantities, in display order."""

    volumes: list[VolumeQuantity] = field(default_factory=list)

    def slot(self, volume_id: str) -> VolumeQuantity:
        """Return the slot for a volume, appending it when missing."""
        for volume in self.volumes:
            if volume.volume_id == volume_id:
                return volume
        volume = VolumeQuantity(volume_id=volume_id)
        self.volumes.append(volume)
        return volume


@dataclass
class Size:
    """Dual big/small counts (ג/ק)."""

    big: int = 0
    small: int = 0


@dataclass
class Variations:
    """Per-variation big/small counts."""

    variations: list[VariationQuantity] = field(default_factory=list)

    def slot(self, variation_id: str) -> VariationQuantity | None:
        return next(
            (v for v in self.variations if v.variation_id == variation_id), None
        )


Measurement = Quantity | Liters | Size | Variations


def measurement_for(
    item: CatalogItem, volumes: tuple[VolumeLabel, ...] | list[VolumeLabel]
) -> Measurement:
    """Build the zeroed measurement for a catalog item."""
    if item.variations:
        return Variations(
            variations=[VariationQuantity(variation_id=v.id) for v in item.variations]
        )
    if item.measurement_type == MeasurementType.LITERS:
        return Liters(volumes=initial_volumes(item, volumes))
    if item.measurement_type == MeasurementType.SIZE:
        return Size()
    return Quantity()


def initial_volumes(
    item: CatalogItem, volumes: tuple[VolumeLabel, ...] | list[VolumeLabel]
) -> list[VolumeQuantity]:
    """Global volumes first, then the item's active custom volumes."""
    slots = [VolumeQuantity(volume_id=volume.id) for volume in volumes]
    known = {slot.volume_id for slot in slots}
    for custom in item.custom_volumes:
        if custom.active and custom.id not in known:
            slots.append(VolumeQuantity(volume_id=custom.id))
            known.add(custom.id)
    return slots


def has_quantity(measurement: Measurement) -> bool:
    """Return True when any quantity field is positive."""
    match measurement:
        case Quantity(count=count):
            return count > 0
        case Liters(volumes=volumes):
            return any(v.quantity > 0 for v in volumes)
        case Size(big=big, small=small):
            return big > 0 or small > 0
        case Variations(variations=variations):
            return any(v.size_big > 0 or v.size_small > 0 for v in variations)
    return False


def reset(measurement: Measurement) -> None:
    """Zero every quantity while keeping the slot layout."""
    match measurement:
        case Quantity():
            measurement.count = 0
        case Liters(volumes=volumes):
            for volume in volumes:
                volume.quantity = 0
        case Size():
            measurement.big = 0
            measurement.small = 0
        case Variations(variations=variations):
            for variation in variations:
                variation.size_big = 0
                variation.size_small = 0


def discipline_name(measurement: Measurement) -> str:
    """Short name used in logs and API payloads."""
    match measurement:
        case Quantity():
            return "quantity"
        case Liters():
            return "liters"
        case Size():
            return "size"
        case Variations():
            return "variations"
    return "unknown"
