"""Flat rows exchanged with the persistence boundary and their routing targets."""

from dataclasses import dataclass, field
from typing import Literal

from catering_orders.domain.catalog import Category

SizeType = Literal["big", "small"]


@dataclass(frozen=True)
class PersistedRow:
    """One stored order line.

    At most one of ``volume_id``, ``size_type``, ``variation_id`` and
    ``add_on_id`` identifies the slot, except that variation rows also carry
    ``size_type`` and add-on rows may carry ``volume_id``.
    """

    food_item_id: str
    quantity: int
    volume_id: str | None = None
    size_type: SizeType | None = None
    variation_id: str | None = None
    add_on_id: str | None = None
    preparation_id: str | None = None
    note: str | None = None
    price: float | None = None


@dataclass(frozen=True)
class PersistedExtraVariation:
    variation_id: str
    name: str
    size_big: int = 0
    size_small: int = 0


@dataclass(frozen=True)
class PersistedExtraRow:
    """Stored extras overlay entry."""

    id: str
    source_food_item_id: str
    source_category: Category
    name: str
    price: float
    quantity: int | None = None
    size_big: int | None = None
    size_small: int | None = None
    variations: tuple[PersistedExtraVariation, ...] = field(default=())
    note: str | None = None
    preparation_name: str | None = None


@dataclass(frozen=True)
class AddOnVolumeTarget:
    add_on_id: str
    volume_id: str


@dataclass(frozen=True)
class AddOnQuantityTarget:
    add_on_id: str


@dataclass(frozen=True)
class VariationTarget:
    variation_id: str
    size_type: SizeType | None


@dataclass(frozen=True)
class VolumeTarget:
    volume_id: str


@dataclass(frozen=True)
class SizeTarget:
    size_type: SizeType


@dataclass(frozen=True)
class RegularTarget:
    pass


RowTarget = (
    AddOnVolumeTarget
    | AddOnQuantityTarget
    | VariationTarget
    | VolumeTarget
    | SizeTarget
    | RegularTarget
)
