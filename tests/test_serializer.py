"""Tests for flattening editor state into persisted rows."""

import pytest

from catering_orders.domain.catalog import Category
from catering_orders.domain.extras import ExtraPayload
from catering_orders.domain.rows import PersistedRow
from catering_orders.services.extras import ExtrasOverlay
from catering_orders.services.selection import SelectionStore
from catering_orders.services.serializer import OrderSerializer


@pytest.fixture
def store(catalog) -> SelectionStore:
    return SelectionStore.from_catalog(catalog, overlay=ExtrasOverlay())


def test_liters_entry_writes_one_row_per_volume_with_note_once(store) -> None:
    store.set_volume_quantity("s-eggplant", "v1", 2)
    store.set_volume_quantity("s-eggplant", "v05", 1)
    store.set_add_on_quantity("s-eggplant", "a-tahini", 3)
    store.set_note("s-eggplant", "בלי שום")

    rows, _ = OrderSerializer().serialize(store)

    assert rows == [
        PersistedRow("s-eggplant", 2, volume_id="v1", note="בלי שום"),
        PersistedRow("s-eggplant", 1, volume_id="v05"),
        PersistedRow("s-eggplant", 3, add_on_id="a-tahini"),
    ]
    assert [row.note for row in rows].count("בלי שום") == 1


def test_size_and_variation_rows(store) -> None:
    store.set_size("side-rice", "big", 2)
    store.set_size("side-rice", "small", 1)
    store.set_preparation("side-rice", "p-yellow")
    store.set_variation_size("side-potato", "var-fried", "small", 4)

    rows, _ = OrderSerializer().serialize(store)

    assert rows == [
        PersistedRow("side-rice", 2, size_type="big", preparation_id="p-yellow"),
        PersistedRow("side-rice", 1, size_type="small", preparation_id="p-yellow"),
        PersistedRow(
            "side-potato", 4, size_type="small", variation_id="var-fried"
        ),
    ]


def test_zeroed_quantities_write_no_rows(store) -> None:
    store.set_volume_quantity("s-eggplant", "v1", 2)
    store.set_volume_quantity("s-eggplant", "v1", 0)
    store.set_regular_quantity("main-schnitzel", 3)
    store.set_regular_quantity("main-schnitzel", 0)

    rows, _ = OrderSerializer().serialize(store)

    assert rows == []


def test_open_liters_editor_without_quantities_writes_no_rows(store) -> None:
    store.toggle("s-eggplant", True)
    store.set_note("s-eggplant", "לבדוק")

    rows, _ = OrderSerializer().serialize(store)

    assert rows == []


def test_extras_item_carries_price_on_first_row(store) -> None:
    store.set_regular_quantity("extra-drinks", 12)
    store.set_price("extra-drinks", 60.0)

    rows, _ = OrderSerializer().serialize(store)

    assert rows == [PersistedRow("extra-drinks", 12, price=60.0)]


def test_overlay_entries_become_extra_rows(store) -> None:
    store.overlay.add(
        Category.MAINS, "main-schnitzel", ExtraPayload(quantity=2), 50.0, "שניצל"
    )

    rows, extra_rows = OrderSerializer().serialize(store, store.overlay)

    assert rows == []
    assert len(extra_rows) == 1
    assert extra_rows[0].source_food_item_id == "main-schnitzel"
    assert extra_rows[0].quantity == 2
    assert extra_rows[0].price == 50.0
