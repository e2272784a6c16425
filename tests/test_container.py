"""Tests for container wiring."""

from catering_orders.config import Settings
from catering_orders.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.order_service is not None
    assert container.order_service.catalog_ttl_seconds == 300


def test_build_container_parses_implicit_pairings() -> None:
    settings = Settings(
        _env_file=None,
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        implicit_note_pairings="s-eggplant:s-pickles",
    )

    container = build_container(settings)

    pairings = container.order_service.linker.pairings
    assert pairings.suppresses_note("s-eggplant", "s-pickles")
    assert not pairings.suppresses_note("s-pickles", "s-eggplant")
