"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from catering_orders.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from catering_orders.adapters.supabase_order_repository import (
    SupabaseOrderRepository,
)
from catering_orders.config import Settings, parse_implicit_pairings
from catering_orders.services.addons import AddOnLinker, ImplicitPairings
from catering_orders.services.cache import InMemoryCache
from catering_orders.services.orders import OrderService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    order_service: OrderService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    linker = AddOnLinker(
        pairings=ImplicitPairings(
            parse_implicit_pairings(resolved_settings.implicit_note_pairings)
        )
    )
    order_service = OrderService(
        repository=SupabaseOrderRepository(supabase_client),
        catalog_repository=SupabaseCatalogRepository(supabase_client),
        linker=linker,
        cache=InMemoryCache(),
        catalog_ttl_seconds=resolved_settings.catalog_cache_ttl_seconds,
    )
    return AppContainer(settings=resolved_settings, order_service=order_service)
