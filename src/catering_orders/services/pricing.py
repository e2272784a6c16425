"""Payable total derived from pricing scalars and current store state."""

from catering_orders.domain.catalog import Category
from catering_orders.domain.orders import PricingFields
from catering_orders.services.extras import ExtrasOverlay
from catering_orders.services.selection import SelectionStore


def extras_category_total(store: SelectionStore) -> float:
    """Sum prices of selected extras-category items that carry one."""
    return sum(
        entry.price
        for entry in store.category(Category.EXTRAS)
        if entry.selected and entry.price
    )


def calculate_total(
    pricing: PricingFields,
    overlay: ExtrasOverlay,
    store: SelectionStore,
) -> float | None:
    """Return portions × price + delivery + overlay prices + extras prices.

    Without both portion scalars the total is the extras sum alone, or
    ``None`` when nothing is priced.
    """
    extras = overlay.total_price() + extras_category_total(store)
    if pricing.total_portions and pricing.price_per_portion:
        return (
            pricing.total_portions * pricing.price_per_portion
            + (pricing.delivery_fee or 0)
            + extras
        )
    return extras if extras > 0 else None
