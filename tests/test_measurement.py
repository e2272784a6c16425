"""Tests for the measurement model and row routing."""

from catering_orders.domain.measurements import (
    Liters,
    Quantity,
    Size,
    Variations,
    VolumeQuantity,
    has_quantity,
    measurement_for,
    reset,
)
from catering_orders.domain.rows import (
    AddOnQuantityTarget,
    AddOnVolumeTarget,
    PersistedRow,
    RegularTarget,
    SizeTarget,
    VariationTarget,
    VolumeTarget,
)
from catering_orders.services.measurement import place_quantity, route_row
from catering_orders.services.selection import new_entry


def test_measurement_for_each_discipline(catalog) -> None:
    volumes = catalog.volumes

    assert isinstance(measurement_for(catalog.item("s-eggplant"), volumes), Liters)
    assert isinstance(measurement_for(catalog.item("side-rice"), volumes), Size)
    assert isinstance(measurement_for(catalog.item("side-potato"), volumes), Variations)
    schnitzel = catalog.item("main-schnitzel")
    assert isinstance(measurement_for(schnitzel, volumes), Quantity)


def test_liters_layout_lists_global_then_active_custom_volumes(catalog) -> None:
    measurement = measurement_for(catalog.item("s-pickles"), catalog.volumes)

    assert [v.volume_id for v in measurement.volumes] == ["v1", "v05", "cv-jar"]


def test_reset_keeps_slots() -> None:
    measurement = Liters(volumes=[VolumeQuantity("v1", 2), VolumeQuantity("v05", 1)])

    reset(measurement)

    assert [v.volume_id for v in measurement.volumes] == ["v1", "v05"]
    assert not has_quantity(measurement)


def test_route_row_precedence(catalog) -> None:
    eggplant = catalog.item("s-eggplant")
    potato = catalog.item("side-potato")
    rice = catalog.item("side-rice")
    schnitzel = catalog.item("main-schnitzel")

    add_on_volume = PersistedRow(
        "s-eggplant", 1, volume_id="v1", add_on_id="a-tahini"
    )
    add_on_quantity = PersistedRow("s-eggplant", 1, add_on_id="a-tahini")
    variation = PersistedRow(
        "side-potato", 2, size_type="small", variation_id="var-fried"
    )
    volume = PersistedRow("s-eggplant", 3, volume_id="v05")
    size = PersistedRow("side-rice", 1, size_type="small")
    regular = PersistedRow("main-schnitzel", 4)

    assert route_row(add_on_volume, eggplant).target == AddOnVolumeTarget(
        "a-tahini", "v1"
    )
    assert route_row(add_on_quantity, eggplant).target == AddOnQuantityTarget(
        "a-tahini"
    )
    assert route_row(variation, potato).target == VariationTarget("var-fried", "small")
    assert route_row(volume, eggplant).target == VolumeTarget("v05")
    assert route_row(size, rice).target == SizeTarget("small")
    assert route_row(regular, schnitzel).target == RegularTarget()


def test_size_row_without_size_type_falls_back_to_big(catalog) -> None:
    routing = route_row(PersistedRow("side-rice", 2), catalog.item("side-rice"))

    assert routing.target == SizeTarget("big")
    assert routing.fallback is not None


def test_variation_row_without_size_type_falls_back_to_big(catalog) -> None:
    routing = route_row(
        PersistedRow("side-potato", 2, variation_id="var-baked"),
        catalog.item("side-potato"),
    )

    assert routing.target == VariationTarget("var-baked", "big")
    assert routing.fallback is not None


def test_place_quantity_sums_into_slot(catalog) -> None:
    entry = new_entry(catalog.item("s-eggplant"), catalog)

    assert place_quantity(entry, VolumeTarget("v1"), 2)
    assert place_quantity(entry, VolumeTarget("v1"), 1)

    assert entry.measurement.slot("v1").quantity == 3


def test_place_quantity_rejects_mismatched_slot(catalog) -> None:
    entry = new_entry(catalog.item("main-schnitzel"), catalog)

    assert not place_quantity(entry, SizeTarget("big"), 2)
    assert not place_quantity(entry, AddOnQuantityTarget("a-tahini"), 1)
    assert entry.measurement == Quantity(count=0)


def test_place_quantity_rejects_unknown_variation(catalog) -> None:
    entry = new_entry(catalog.item("side-potato"), catalog)

    assert not place_quantity(entry, VariationTarget("var-missing", "big"), 1)
