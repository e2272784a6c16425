"""Tests for the extras overlay."""

from itertools import count

import pytest

from catering_orders.domain.catalog import Category
from catering_orders.domain.extras import ExtraItem, ExtraPayload, ExtraVariation
from catering_orders.services.extras import ExtrasOverlay


def _overlay() -> ExtrasOverlay:
    ids = count(1)
    return ExtrasOverlay(id_factory=lambda: f"extra-{next(ids)}")


def test_add_creates_entry() -> None:
    overlay = _overlay()

    entry = overlay.add(
        Category.MAINS,
        "main-schnitzel",
        ExtraPayload(quantity=2),
        60.0,
        "שניצל",
        preparation_name="מטוגן",
    )

    assert entry.id == "extra-1"
    assert entry.quantity == 2
    assert entry.size_big is None
    assert entry.preparation_name == "מטוגן"
    assert overlay.total_price() == 60.0


@pytest.mark.parametrize(
    ("first", "second"), [((2, 30.0), (3, 45.0)), ((3, 45.0), (2, 30.0))]
)
def test_repeated_adds_merge_regardless_of_order(first, second) -> None:
    overlay = _overlay()
    for quantity, price in (first, second):
        overlay.add(
            Category.MAINS,
            "main-schnitzel",
            ExtraPayload(quantity=quantity),
            price,
            "שניצל",
        )

    assert len(overlay.entries) == 1
    entry = overlay.entries[0]
    assert entry.quantity == 5
    assert entry.price == 75.0


def test_merge_sums_variations_and_joins_notes() -> None:
    overlay = _overlay()
    overlay.add(
        Category.SIDES,
        "side-potato",
        ExtraPayload(variations=(ExtraVariation("var-baked", "אפוי", 1, 0),)),
        20.0,
        "תפוחי אדמה",
        note="חם",
    )
    entry = overlay.add(
        Category.SIDES,
        "side-potato",
        ExtraPayload(
            variations=(
                ExtraVariation("var-baked", "אפוי", 2, 1),
                ExtraVariation("var-fried", "מטוגן", 0, 1),
            )
        ),
        25.0,
        "תפוחי אדמה",
        note="בצד",
    )

    assert [(v.variation_id, v.size_big, v.size_small) for v in entry.variations] == [
        ("var-baked", 3, 1),
        ("var-fried", 0, 1),
    ]
    assert entry.note == "חם | בצד"
    assert entry.price == 45.0


def test_items_outside_overlay_categories_are_rejected() -> None:
    with pytest.raises(ValueError):
        _overlay().add(
            Category.SALADS, "s-eggplant", ExtraPayload(quantity=1), 10.0, "חצילים"
        )


def test_set_price_and_remove() -> None:
    overlay = _overlay()
    entry = overlay.add(
        Category.SIDES, "side-rice", ExtraPayload(size_big=1), 20.0, "אורז"
    )

    overlay.set_price(entry.id, 35.0)
    assert overlay.total_price() == 35.0

    assert overlay.remove(entry.id)
    assert not overlay.remove(entry.id)
    with pytest.raises(KeyError):
        overlay.set_price(entry.id, 1.0)


def test_summarize_combines_restored_entries() -> None:
    overlay = _overlay()
    for entry_id, quantity, price in (("a", 2, 30.0), ("b", 1, 15.0)):
        overlay.restore(
            ExtraItem(
                id=entry_id,
                source_food_item_id="main-chicken",
                source_category=Category.MAINS,
                name="עוף",
                price=price,
                quantity=quantity,
            )
        )

    summary = overlay.summarize("main-chicken")

    assert summary.id == "a"
    assert summary.quantity == 3
    assert summary.price == 45.0
    assert overlay.summarize("main-schnitzel") is None
