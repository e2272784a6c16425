"""Supabase repository for orders, order rows and extras overlay rows."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar
from uuid import uuid4

from supabase import Client, PostgrestAPIError

from catering_orders.domain.catalog import Category
from catering_orders.domain.orders import (
    CustomerFields,
    OrderDraft,
    OrderStatus,
    OrderSummary,
    PricingFields,
    SaveResult,
    StoredOrder,
)
from catering_orders.domain.rows import (
    PersistedExtraRow,
    PersistedExtraVariation,
    PersistedRow,
)
from catering_orders.errors import (
    BoundaryError,
    OrderNotFoundError,
    ReconciliationWarning,
)
from catering_orders.services.orders import OrderRepository

logger = logging.getLogger(__name__)

_SUMMARY_COLUMNS = "*, customer:customers(*)"

T = TypeVar("T")


@dataclass
class SupabaseOrderRepository(OrderRepository):
    """Supabase implementation of the order persistence boundary."""

    client: Client

    def load_order(self, order_id: str) -> StoredOrder | None:
        """Return an order with its item and extra rows, if present."""
        try:
            response = (
                self.client.table("orders")
                .select("*, customer:customers(*)")
                .eq("id", order_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                return None
            order = response.data[0]
            items_response = (
                self.client.table("order_items")
                .select("*")
                .eq("order_id", order_id)
                .execute()
            )
            extras_response = (
                self.client.table("order_extra_items")
                .select("*, variations:order_extra_item_variations(*)")
                .eq("order_id", order_id)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc

        warnings: list[ReconciliationWarning] = []
        rows = _parse_rows(items_response.data or [], _parse_row, warnings)
        extra_rows = _parse_rows(extras_response.data or [], _parse_extra, warnings)
        return StoredOrder(
            id=str(order["id"]),
            order_number=order.get("order_number"),
            customer=_parse_customer(order),
            pricing=_parse_pricing(order),
            rows=rows,
            extra_rows=extra_rows,
            status=_parse_status(order.get("status")),
            warnings=warnings,
        )

    def save_order(self, draft: OrderDraft) -> SaveResult:
        """Create the customer link, the order and all of its rows."""
        try:
            customer_id = self._find_or_create_customer(draft.customer)
            order_id = str(uuid4())
            response = (
                self.client.table("orders")
                .insert(
                    {
                        "id": order_id,
                        "customer_id": customer_id,
                        "status": "active",
                        **_order_payload(draft),
                    }
                )
                .execute()
            )
            if not response.data:
                raise BoundaryError("Failed to create order")
            order_number = response.data[0].get("order_number")
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc

        try:
            self._insert_rows(order_id, draft)
        except PostgrestAPIError as exc:
            logger.warning("Rolling back order %s after row insert failure", order_id)
            try:
                self.client.table("orders").delete().eq("id", order_id).execute()
            except PostgrestAPIError:
                logger.exception("Failed to roll back order %s", order_id)
            raise BoundaryError(exc.message or str(exc)) from exc
        return SaveResult(order_id=order_id, order_number=order_number)

    def update_order(self, order_id: str, draft: OrderDraft) -> SaveResult:
        """Update order fields and replace every row."""
        try:
            customer_id = self._find_or_create_customer(draft.customer)
            response = (
                self.client.table("orders")
                .update({"customer_id": customer_id, **_order_payload(draft)})
                .eq("id", order_id)
                .execute()
            )
            if not response.data:
                raise OrderNotFoundError(order_id)
            order_number = response.data[0].get("order_number")
            self.client.table("order_items").delete().eq("order_id", order_id).execute()
            self.client.table("order_extra_items").delete().eq(
                "order_id", order_id
            ).execute()
            self._insert_rows(order_id, draft)
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc
        return SaveResult(order_id=order_id, order_number=order_number)

    def find_orders_by_phone(self, phone: str) -> list[OrderSummary]:
        """Return a customer's orders, newest first."""
        try:
            customer = (
                self.client.table("customers")
                .select("id")
                .eq("phone", phone)
                .limit(1)
                .execute()
            )
            if not customer.data:
                return []
            response = (
                self.client.table("orders")
                .select(_SUMMARY_COLUMNS)
                .eq("customer_id", customer.data[0]["id"])
                .order("created_at", desc=True)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc
        return [_parse_summary(row) for row in response.data or []]

    def list_orders(self, date_from: str, date_to: str) -> list[OrderSummary]:
        """Return orders dated within the inclusive range, earliest first."""
        try:
            response = (
                self.client.table("orders")
                .select(_SUMMARY_COLUMNS)
                .gte("order_date", date_from)
                .lte("order_date", date_to)
                .order("order_date")
                .order("order_time")
                .execute()
            )
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc
        return [_parse_summary(row) for row in response.data or []]

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Set an order's lifecycle status."""
        try:
            response = (
                self.client.table("orders")
                .update({"status": status.value})
                .eq("id", order_id)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise BoundaryError(exc.message or str(exc)) from exc
        if not response.data:
            raise OrderNotFoundError(order_id)

    def _find_or_create_customer(self, customer: CustomerFields) -> str:
        response = (
            self.client.table("customers")
            .select("*")
            .eq("phone", customer.phone)
            .limit(1)
            .execute()
        )
        if response.data:
            existing = response.data[0]
            self.client.table("customers").update(
                {
                    "name": customer.name or existing.get("name"),
                    "address": customer.address or existing.get("address"),
                    "phone_alt": customer.phone_alt or existing.get("phone_alt"),
                }
            ).eq("id", existing["id"]).execute()
            return str(existing["id"])

        customer_id = str(uuid4())
        created = (
            self.client.table("customers")
            .insert(
                {
                    "id": customer_id,
                    "phone": customer.phone,
                    "name": customer.name or None,
                    "address": customer.address or None,
                    "phone_alt": customer.phone_alt or None,
                }
            )
            .execute()
        )
        if not created.data:
            raise BoundaryError("Failed to create customer")
        return customer_id

    def _insert_rows(self, order_id: str, draft: OrderDraft) -> None:
        items = [_row_payload(order_id, row) for row in draft.rows]
        if items:
            self.client.table("order_items").insert(items).execute()
        if not draft.extra_rows:
            return
        self.client.table("order_extra_items").insert(
            [_extra_payload(order_id, row) for row in draft.extra_rows]
        ).execute()
        variations = [
            {
                "id": str(uuid4()),
                "extra_item_id": row.id,
                "variation_id": variation.variation_id,
                "name": variation.name,
                "size_big": variation.size_big,
                "size_small": variation.size_small,
            }
            for row in draft.extra_rows
            for variation in row.variations
        ]
        if variations:
            self.client.table("order_extra_item_variations").insert(
                variations
            ).execute()


def _order_payload(draft: OrderDraft) -> dict[str, object]:
    customer = draft.customer
    pricing = draft.pricing
    return {
        "order_date": customer.order_date,
        "order_time": customer.order_time or None,
        "customer_time": customer.customer_time or None,
        "delivery_address": customer.delivery_address or None,
        "notes": customer.notes or None,
        "total_portions": pricing.total_portions,
        "price_per_portion": pricing.price_per_portion,
        "delivery_fee": pricing.delivery_fee,
    }


def _row_payload(order_id: str, row: PersistedRow) -> dict[str, object]:
    return {
        "id": str(uuid4()),
        "order_id": order_id,
        "food_item_id": row.food_item_id,
        "liter_size_id": row.volume_id,
        "size_type": row.size_type,
        "variation_id": row.variation_id,
        "add_on_id": row.add_on_id,
        "quantity": row.quantity,
        "preparation_id": row.preparation_id,
        "item_note": row.note,
        "price": row.price,
    }


def _extra_payload(order_id: str, row: PersistedExtraRow) -> dict[str, object]:
    return {
        "id": row.id,
        "order_id": order_id,
        "source_food_item_id": row.source_food_item_id,
        "source_category": row.source_category.value,
        "name": row.name,
        "quantity": row.quantity,
        "size_big": row.size_big,
        "size_small": row.size_small,
        "price": row.price,
        "note": row.note,
        "preparation_name": row.preparation_name,
    }


def _parse_customer(order: dict[str, object]) -> CustomerFields:
    customer = order.get("customer") or {}
    if not isinstance(customer, dict):
        customer = {}
    return CustomerFields(
        name=str(customer.get("name") or ""),
        phone=str(customer.get("phone") or ""),
        phone_alt=str(customer.get("phone_alt") or ""),
        address=str(customer.get("address") or ""),
        order_date=str(order.get("order_date") or ""),
        order_time=str(order.get("order_time") or ""),
        customer_time=str(order.get("customer_time") or ""),
        delivery_address=str(order.get("delivery_address") or ""),
        notes=str(order.get("notes") or ""),
    )


def _parse_pricing(order: dict[str, object]) -> PricingFields:
    portions = order.get("total_portions")
    price = order.get("price_per_portion")
    fee = order.get("delivery_fee")
    return PricingFields(
        total_portions=int(portions) if isinstance(portions, int | float) else None,
        price_per_portion=float(price) if isinstance(price, int | float) else None,
        delivery_fee=float(fee) if isinstance(fee, int | float) else None,
    )


def _parse_status(value: object) -> OrderStatus:
    if value in {status.value for status in OrderStatus}:
        return OrderStatus(str(value))
    return OrderStatus.ACTIVE


def _parse_summary(order: dict[str, object]) -> OrderSummary:
    customer = _parse_customer(order)
    return OrderSummary(
        id=str(order["id"]),
        order_number=order.get("order_number"),  # type: ignore[arg-type]
        status=_parse_status(order.get("status")),
        order_date=customer.order_date,
        order_time=customer.order_time,
        customer_name=customer.name,
        customer_phone=customer.phone,
        delivery_address=customer.delivery_address,
    )


def _parse_rows(
    rows: list[dict[str, object]],
    parse: Callable[[dict[str, object]], T],
    warnings: list[ReconciliationWarning],
) -> list[T]:
    parsed: list[T] = []
    for row in rows:
        try:
            parsed.append(parse(row))
        except (KeyError, TypeError, ValueError) as exc:
            food_item_id = str(
                row.get("food_item_id") or row.get("source_food_item_id") or ""
            )
            logger.warning("Skipping unreadable stored row %s: %s", row.get("id"), exc)
            warnings.append(
                ReconciliationWarning(
                    food_item_id, f"stored row could not be read: {exc}"
                )
            )
    return parsed


def _parse_row(row: dict[str, object]) -> PersistedRow:
    size_type = row.get("size_type")
    if size_type not in ("big", "small"):
        size_type = None
    price = row.get("price")
    return PersistedRow(
        food_item_id=str(row["food_item_id"]),
        quantity=int(row.get("quantity", 0) or 0),
        volume_id=_optional_str(row.get("liter_size_id")),
        size_type=size_type,  # type: ignore[arg-type]
        variation_id=_optional_str(row.get("variation_id")),
        add_on_id=_optional_str(row.get("add_on_id")),
        preparation_id=_optional_str(row.get("preparation_id")),
        note=_optional_str(row.get("item_note")),
        price=float(price) if isinstance(price, int | float) else None,
    )


def _parse_extra(row: dict[str, object]) -> PersistedExtraRow:
    variations = row.get("variations") or []
    return PersistedExtraRow(
        id=str(row["id"]),
        source_food_item_id=str(row["source_food_item_id"]),
        source_category=Category(str(row["source_category"])),
        name=str(row.get("name", "")),
        price=float(row.get("price", 0.0) or 0.0),
        quantity=_optional_int(row.get("quantity")),
        size_big=_optional_int(row.get("size_big")),
        size_small=_optional_int(row.get("size_small")),
        variations=tuple(
            PersistedExtraVariation(
                variation_id=str(v["variation_id"]),
                name=str(v.get("name", "")),
                size_big=int(v.get("size_big", 0) or 0),
                size_small=int(v.get("size_small", 0) or 0),
            )
            for v in variations
            if isinstance(v, dict)
        ),
        note=_optional_str(row.get("note")),
        preparation_name=_optional_str(row.get("preparation_name")),
    )


def _optional_str(value: object) -> str | None:
    return str(value) if value else None


def _optional_int(value: object) -> int | None:
    return int(value) if isinstance(value, int | float) else None
