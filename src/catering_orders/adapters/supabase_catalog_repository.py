"""Supabase-backed catalog repository."""

import logging
from collections import defaultdict
from dataclasses import dataclass

from supabase import Client, PostgrestAPIError

from catering_orders.domain.catalog import (
    AddOn,
    Catalog,
    CatalogItem,
    Category,
    CustomVolume,
    Preparation,
    Variation,
    VolumeLabel,
    resolve_measurement_type,
)
from catering_orders.errors import BoundaryError
from catering_orders.services.orders import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Reads active catalog items and their options from Supabase."""

    client: Client

    def load_catalog(self) -> Catalog:
        """Return the active catalog with variations, add-ons and volumes."""
        try:
            categories = self._select("categories")
            food_items = self._select("food_items", active_only=True)
            volumes = self._select("liter_sizes")
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc
        add_ons = self._select_optional("food_item_add_ons", active_only=True)
        variations = self._select_optional("food_item_variations", active_only=True)
        preparations = self._select_optional(
            "food_item_preparations", active_only=True
        )
        custom_volumes = self._select_optional("food_item_custom_liters")

        category_keys = _category_keys(categories)
        add_ons_by_item = _group(add_ons, "parent_food_item_id")
        variations_by_item = _group(variations, "parent_food_item_id")
        preparations_by_item = _group(preparations, "parent_food_item_id")
        custom_by_item = _group(custom_volumes, "food_item_id")

        items: list[CatalogItem] = []
        for row in food_items:
            category = category_keys.get(str(row.get("category_id")))
            if category is None:
                logger.warning(
                    "Skipping food item %s with unknown category", row.get("id")
                )
                continue
            item_id = str(row["id"])
            items.append(
                _parse_item(
                    row,
                    category,
                    add_ons_by_item[item_id],
                    variations_by_item[item_id],
                    preparations_by_item[item_id],
                    custom_by_item[item_id],
                )
            )
        return Catalog(
            items=tuple(items),
            volumes=tuple(_parse_volume(row) for row in volumes),
        )

    def _select(self, table: str, active_only: bool = False) -> list[dict[str, object]]:
        query = self.client.table(table).select("*")
        if active_only:
            query = query.eq("is_active", True)
        response = query.order("sort_order").execute()
        return response.data or []

    def _select_optional(
        self, table: str, active_only: bool = False
    ) -> list[dict[str, object]]:
        """Item options are optional; a failed read leaves items without them."""
        try:
            return self._select(table, active_only)
        except PostgrestAPIError as exc:
            logger.warning("Failed to load %s: %s", table, exc.message or exc)
            return []


def _category_keys(rows: list[dict[str, object]]) -> dict[str, Category]:
    keys: dict[str, Category] = {}
    for row in rows:
        name_en = row.get("name_en")
        if name_en in {category.value for category in Category}:
            keys[str(row["id"])] = Category(str(name_en))
    return keys


def _group(
    rows: list[dict[str, object]], key: str
) -> defaultdict[str, list[dict[str, object]]]:
    grouped: defaultdict[str, list[dict[str, object]]] = defaultdict(list)
    for row in rows:
        if row.get(key):
            grouped[str(row[key])].append(row)
    return grouped


def _parse_item(  # noqa: PLR0913
    row: dict[str, object],
    category: Category,
    add_ons: list[dict[str, object]],
    variations: list[dict[str, object]],
    preparations: list[dict[str, object]],
    custom_volumes: list[dict[str, object]],
) -> CatalogItem:
    multiplier = row.get("portion_multiplier")
    return CatalogItem(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        category=category,
        measurement_type=resolve_measurement_type(
            row.get("measurement_type"),  # type: ignore[arg-type]
            category,
            bool(row.get("has_liters")),
        ),
        variations=tuple(
            Variation(id=str(v["id"]), name=str(v.get("name", ""))) for v in variations
        ),
        add_ons=tuple(
            AddOn(
                id=str(a["id"]),
                name=str(a.get("name", "")),
                linked_food_item_id=(
                    str(a["linked_food_item_id"])
                    if a.get("linked_food_item_id")
                    else None
                ),
            )
            for a in add_ons
        ),
        custom_volumes=tuple(
            CustomVolume(
                id=str(c["id"]),
                label=str(c.get("label", "")),
                active=bool(c.get("is_active", True)),
            )
            for c in custom_volumes
        ),
        preparations=tuple(
            Preparation(id=str(p["id"]), name=str(p.get("name", "")))
            for p in preparations
        ),
        portion_multiplier=(
            float(multiplier) if isinstance(multiplier, int | float) else None
        ),
        portion_unit=str(row["portion_unit"]) if row.get("portion_unit") else None,
    )


def _parse_volume(row: dict[str, object]) -> VolumeLabel:
    size = row.get("size")
    return VolumeLabel(
        id=str(row["id"]),
        label=str(row.get("label", "")),
        size=float(size) if isinstance(size, int | float) else None,
        sort_order=int(row.get("sort_order", 0) or 0),
    )
