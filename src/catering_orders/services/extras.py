"""Extras overlay: ad hoc priced quantities keyed by source catalog item."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from uuid import uuid4

from catering_orders.domain.catalog import OVERLAY_SOURCE_CATEGORIES, Category
from catering_orders.domain.extras import ExtraItem, ExtraPayload, ExtraVariation

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = " | "


def _new_entry_id() -> str:
    return str(uuid4())


@dataclass
class ExtrasOverlay:
    """Overlay entries attached to an order outside its category selection."""

    _entries: list[ExtraItem] = field(default_factory=list)
    id_factory: Callable[[], str] = field(default=_new_entry_id, repr=False)

    @property
    def entries(self) -> list[ExtraItem]:
        return list(self._entries)

    def add(  # noqa: PLR0913
        self,
        source_category: Category,
        food_item_id: str,
        payload: ExtraPayload,
        price: float,
        name: str,
        preparation_name: str | None = None,
        note: str | None = None,
    ) -> ExtraItem:
        """Add an item as extra, merging into an existing entry for it."""
        if source_category not in OVERLAY_SOURCE_CATEGORIES:
            raise ValueError(f"Items from {source_category} cannot be added as extras")
        existing = self._find_by_source(food_item_id)
        if existing is None:
            entry = ExtraItem(
                id=self.id_factory(),
                source_food_item_id=food_item_id,
                source_category=source_category,
                name=name,
                price=price,
                quantity=payload.quantity,
                size_big=payload.size_big,
                size_small=payload.size_small,
                variations=[replace(v) for v in payload.variations] or None,
                note=note or None,
                preparation_name=preparation_name or None,
            )
            self._entries.append(entry)
            logger.info("Added extra %s for item %s", entry.id, food_item_id)
            return entry

        existing.quantity = _sum_optional(existing.quantity, payload.quantity)
        existing.size_big = _sum_optional(existing.size_big, payload.size_big)
        existing.size_small = _sum_optional(existing.size_small, payload.size_small)
        existing.price += price
        if payload.variations:
            existing.variations = _merge_variations(
                existing.variations or [], payload.variations
            )
        if note and note != existing.note:
            existing.note = (
                f"{existing.note}{NOTE_SEPARATOR}{note}" if existing.note else note
            )
        if preparation_name and not existing.preparation_name:
            existing.preparation_name = preparation_name
        logger.info("Merged extra into %s for item %s", existing.id, food_item_id)
        return existing

    def restore(self, entry: ExtraItem) -> None:
        """Insert a persisted entry verbatim, without merging."""
        self._entries.append(entry)

    def remove(self, entry_id: str) -> bool:
        """Delete an entry by id; returns whether one was removed."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def remove_for_source(self, food_item_id: str) -> list[ExtraItem]:
        """Delete every entry keyed to a source item and return them."""
        removed = [e for e in self._entries if e.source_food_item_id == food_item_id]
        if removed:
            self._entries = [
                e for e in self._entries if e.source_food_item_id != food_item_id
            ]
            logger.info(
                "Removed %d extra(s) for cancelled item %s", len(removed), food_item_id
            )
        return removed

    def set_price(self, entry_id: str, price: float) -> ExtraItem:
        """Overwrite an entry's price."""
        entry = self.get(entry_id)
        if entry is None:
            raise KeyError(entry_id)
        entry.price = price
        return entry

    def get(self, entry_id: str) -> ExtraItem | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def for_source(self, food_item_id: str) -> list[ExtraItem]:
        return [e for e in self._entries if e.source_food_item_id == food_item_id]

    def summarize(self, food_item_id: str) -> ExtraItem | None:
        """Combine every entry for a source item into one display view."""
        matches = self.for_source(food_item_id)
        if not matches:
            return None
        if len(matches) == 1:
            return matches[0]
        first = matches[0]
        return ExtraItem(
            id=first.id,
            source_food_item_id=food_item_id,
            source_category=first.source_category,
            name=first.name,
            price=sum(e.price for e in matches),
            quantity=_sum_all(e.quantity for e in matches),
            size_big=_sum_all(e.size_big for e in matches),
            size_small=_sum_all(e.size_small for e in matches),
            variations=first.variations,
            note=first.note,
            preparation_name=first.preparation_name,
        )

    def total_price(self) -> float:
        return sum(entry.price for entry in self._entries)

    def clear(self) -> None:
        self._entries = []

    def _find_by_source(self, food_item_id: str) -> ExtraItem | None:
        return next(
            (e for e in self._entries if e.source_food_item_id == food_item_id), None
        )


def _sum_optional(current: int | None, added: int | None) -> int | None:
    if added is None:
        return current
    return (current or 0) + added


def _sum_all(values: Iterable[int | None]) -> int | None:
    present = [value for value in values if value is not None]
    return sum(present) if present else None


def _merge_variations(
    current: list[ExtraVariation], added: tuple[ExtraVariation, ...]
) -> list[ExtraVariation]:
    merged = [replace(v) for v in current]
    for variation in added:
        existing = next(
            (v for v in merged if v.variation_id == variation.variation_id), None
        )
        if existing is None:
            merged.append(replace(variation))
        else:
            existing.size_big += variation.size_big
            existing.size_small += variation.size_small
    return merged
