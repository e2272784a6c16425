"""Domain models for the extras overlay."""

from dataclasses import dataclass, field

from catering_orders.domain.catalog import Category


@dataclass
class ExtraVariation:
    """Variation payload of an extra item."""

    variation_id: str
    name: str
    size_big: int = 0
    size_small: int = 0


@dataclass
class ExtraItem:
    """Priced quantity of a catalog item added outside its category.

    Payload fields left as ``None`` do not apply to the item's discipline.
    """

    id: str
    source_food_item_id: str
    source_category: Category
    name: str
    price: float = 0.0
    quantity: int | None = None
    size_big: int | None = None
    size_small: int | None = None
    variations: list[ExtraVariation] | None = None
    note: str | None = None
    preparation_name: str | None = None


@dataclass(frozen=True)
class ExtraPayload:
    """Quantities supplied by an "add as extra" action."""

    quantity: int | None = None
    size_big: int | None = None
    size_small: int | None = None
    variations: tuple[ExtraVariation, ...] = field(default=())
