"""Catalog reference data used to build and read orders."""

from dataclasses import dataclass, field
from enum import StrEnum


class Category(StrEnum):
    """Catalog categories an order is composed of."""

    SALADS = "salads"
    MIDDLE_COURSES = "middle_courses"
    SIDES = "sides"
    MAINS = "mains"
    EXTRAS = "extras"
    BAKERY = "bakery"


# Categories whose items can be pushed into the extras overlay.
OVERLAY_SOURCE_CATEGORIES = frozenset(
    {Category.MAINS, Category.SIDES, Category.MIDDLE_COURSES}
)


class MeasurementType(StrEnum):
    """Declared measurement discipline of a catalog item.

    ``NONE`` is stored by the catalog for plain-quantity items and behaves
    exactly like ``QUANTITY``.
    """

    QUANTITY = "quantity"
    LITERS = "liters"
    SIZE = "size"
    NONE = "none"


@dataclass(frozen=True)
class VolumeLabel:
    """Globally defined liquid measure option, e.g. ``1L``."""

    id: str
    label: str
    size: float | None = None
    sort_order: int = 0


@dataclass(frozen=True)
class CustomVolume:
    """Item-specific volume option."""

    id: str
    label: str
    active: bool = True


@dataclass(frozen=True)
class Variation:
    """Item-defined sub-type carrying its own big/small sizes."""

    id: str
    name: str


@dataclass(frozen=True)
class AddOn:
    """Companion add-on of a salad item.

    When ``linked_food_item_id`` is set, quantities picked for the add-on
    are folded into that other catalog item instead of the parent.
    """

    id: str
    name: str
    linked_food_item_id: str | None = None


@dataclass(frozen=True)
class Preparation:
    """Preparation option offered for an item."""

    id: str
    name: str


@dataclass(frozen=True)
class CatalogItem:
    """Read-only descriptor of an orderable item."""

    id: str
    name: str
    category: Category
    measurement_type: MeasurementType = MeasurementType.QUANTITY
    variations: tuple[Variation, ...] = ()
    add_ons: tuple[AddOn, ...] = ()
    custom_volumes: tuple[CustomVolume, ...] = ()
    preparations: tuple[Preparation, ...] = ()
    portion_multiplier: float | None = None
    portion_unit: str | None = None

    def add_on(self, add_on_id: str) -> AddOn | None:
        return next((a for a in self.add_ons if a.id == add_on_id), None)

    def variation(self, variation_id: str) -> Variation | None:
        return next((v for v in self.variations if v.id == variation_id), None)

    def preparation(self, preparation_id: str) -> Preparation | None:
        return next((p for p in self.preparations if p.id == preparation_id), None)


@dataclass(frozen=True)
class Catalog:
    """Catalog snapshot: items plus global volume labels."""

    items: tuple[CatalogItem, ...]
    volumes: tuple[VolumeLabel, ...] = ()
    _by_id: dict[str, CatalogItem] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._by_id.update({item.id: item for item in self.items})

    def item(self, food_item_id: str) -> CatalogItem | None:
        """Return the catalog item for an id, if known."""
        return self._by_id.get(food_item_id)

    def items_in(self, category: Category) -> list[CatalogItem]:
        """Return items of a category in catalog order."""
        return [item for item in self.items if item.category == category]

    def volume_label(self, volume_id: str, item: CatalogItem | None = None) -> str:
        """Resolve a display label, preferring the item's custom volumes."""
        if item is not None:
            for custom in item.custom_volumes:
                if custom.id == volume_id:
                    return custom.label
        for volume in self.volumes:
            if volume.id == volume_id:
                return volume.label
        return volume_id


def resolve_measurement_type(
    raw: str | None, category: Category | None, has_liters: bool = False
) -> MeasurementType:
    """Pick the discipline for an item, falling back by category."""
    if raw in {member.value for member in MeasurementType}:
        return MeasurementType(raw)
    if category == Category.SALADS:
        return MeasurementType.LITERS
    if category == Category.SIDES:
        return MeasurementType.SIZE
    if has_liters:
        return MeasurementType.LITERS
    return MeasurementType.NONE


_GRAM_UNIT = "גרם"
_KILOGRAM_UNIT = 'ק"ג'
_EQUATION_UNITS = frozenset({"חצאים", "קציצות"})


def format_portion_total(item: CatalogItem, quantity: int) -> str | None:
    """Render the derived total for items sold by portion.

    Returns ``None`` when the item has no portion configuration or the
    quantity is not positive.
    """
    if quantity <= 0 or not item.portion_multiplier or not item.portion_unit:
        return None
    total = quantity * item.portion_multiplier
    unit = item.portion_unit
    if unit == _GRAM_UNIT:
        if total >= 1000:
            return f"{_format_number(total / 1000)} {_KILOGRAM_UNIT}"
        return f"{_format_number(total)} {unit}"
    if unit in _EQUATION_UNITS:
        return f"{quantity} = {_format_number(total)}"
    return f"{_format_number(total)} {unit}"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")
