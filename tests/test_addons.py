"""Tests for linked add-on merges."""

import pytest

from catering_orders.domain.measurements import Quantity, Size
from catering_orders.errors import MeasurementMismatchError
from catering_orders.services.addons import AddOnLinker, ImplicitPairings, LinkedPayload
from catering_orders.services.selection import SelectionStore


@pytest.fixture
def store(catalog) -> SelectionStore:
    return SelectionStore.from_catalog(catalog)


def test_merge_sums_volumes_and_appends_note(store) -> None:
    store.set_volume_quantity("s-pickles", "v1", 1)
    store.set_note("s-pickles", "חריף")

    entry = AddOnLinker().merge_add_on(
        store, "s-eggplant", "a-pickles", LinkedPayload(volumes=(("v1", 2), ("v05", 1)))
    )

    assert entry.food_item_id == "s-pickles"
    assert entry.measurement.slot("v1").quantity == 3
    assert entry.measurement.slot("v05").quantity == 1
    assert entry.note == "חריף | תוספת מ-חצילים: 1L:2 ½L:1"
    assert entry.selected


def test_implicit_pairing_merges_without_note(store) -> None:
    linker = AddOnLinker(
        pairings=ImplicitPairings(frozenset({("s-eggplant", "s-pickles")}))
    )

    entry = linker.merge_add_on(
        store, "s-eggplant", "a-pickles", LinkedPayload(volumes=(("cv-jar", 2),))
    )

    assert entry.measurement.slot("cv-jar").quantity == 2
    assert entry.note == ""
    assert entry.selected


def test_quantity_payload_into_plain_quantity_item(store) -> None:
    entry = AddOnLinker().merge_add_on(
        store, "s-eggplant", "a-kebab", LinkedPayload(quantity=4)
    )

    assert entry.measurement == Quantity(count=4)
    assert entry.note == "תוספת מ-חצילים: ×4"


def test_quantity_payload_into_size_item_goes_to_big(store) -> None:
    entry = AddOnLinker().merge_add_on(
        store, "s-eggplant", "a-rice", LinkedPayload(quantity=2)
    )

    assert entry.measurement == Size(big=2, small=0)


def test_quantity_payload_into_liters_item_is_kept_in_note(store) -> None:
    entry = AddOnLinker().merge(
        store,
        linked_item_id="s-pickles",
        payload=LinkedPayload(quantity=3),
        source_item_id="s-eggplant",
        source_name="חצילים",
    )

    assert not entry.has_quantity()
    assert entry.note == "תוספת מ-חצילים: ×3"
    assert entry.selected


def test_empty_payload_only_selects_linked_item(store) -> None:
    entry = AddOnLinker().merge_add_on(
        store, "s-eggplant", "a-pickles", LinkedPayload(volumes=(("v1", 0),))
    )

    assert entry.selected
    assert not entry.measurement.volumes[0].quantity
    assert entry.note == ""


def test_unlinked_add_on_is_rejected(store) -> None:
    with pytest.raises(MeasurementMismatchError):
        AddOnLinker().merge_add_on(
            store, "s-eggplant", "a-tahini", LinkedPayload(quantity=1)
        )


def test_quantity_and_volumes_merge_leave_other_volumes_untouched(store) -> None:
    store.set_volume_quantity("s-pickles", "v05", 1)

    entry = AddOnLinker().merge_add_on(
        store,
        "s-eggplant",
        "a-pickles",
        LinkedPayload(quantity=3, volumes=(("v1", 2),)),
    )

    assert entry.measurement.slot("v05").quantity == 1
    assert entry.measurement.slot("v1").quantity == 2
    assert "×3" in entry.note
