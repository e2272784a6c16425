"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from uuid import uuid4

import pytest

from catering_orders.config import Settings
from catering_orders.containers import AppContainer
from catering_orders.domain.catalog import (
    AddOn,
    Catalog,
    CatalogItem,
    Category,
    CustomVolume,
    MeasurementType,
    Preparation,
    Variation,
    VolumeLabel,
)
from catering_orders.domain.orders import (
    OrderDraft,
    OrderStatus,
    OrderSummary,
    SaveResult,
    StoredOrder,
)
from catering_orders.errors import BoundaryError, OrderNotFoundError
from catering_orders.services.addons import AddOnLinker
from catering_orders.services.cache import InMemoryCache
from catering_orders.services.orders import (
    CatalogRepository,
    OrderRepository,
    OrderService,
)


def build_catalog() -> Catalog:
    """Small catalog covering every measurement discipline."""
    return Catalog(
        volumes=(
            VolumeLabel(id="v1", label="1L", size=1.0, sort_order=1),
            VolumeLabel(id="v05", label="½L", size=0.5, sort_order=2),
        ),
        items=(
            CatalogItem(
                id="s-eggplant",
                name="חצילים",
                category=Category.SALADS,
                measurement_type=MeasurementType.LITERS,
                add_ons=(
                    AddOn(id="a-tahini", name="טחינה"),
                    AddOn(
                        id="a-pickles",
                        name="חמוצים",
                        linked_food_item_id="s-pickles",
                    ),
                    AddOn(
                        id="a-kebab",
                        name="קבב",
                        linked_food_item_id="mid-kebab",
                    ),
                    AddOn(id="a-rice", name="אורז", linked_food_item_id="side-rice"),
                ),
            ),
            CatalogItem(
                id="s-pickles",
                name="חמוצים",
                category=Category.SALADS,
                measurement_type=MeasurementType.LITERS,
                custom_volumes=(
                    CustomVolume(id="cv-jar", label="צנצנת"),
                    CustomVolume(id="cv-old", label="דלי", active=False),
                ),
            ),
            CatalogItem(
                id="mid-kebab",
                name="קבב",
                category=Category.MIDDLE_COURSES,
                measurement_type=MeasurementType.QUANTITY,
                portion_multiplier=150,
                portion_unit="גרם",
            ),
            CatalogItem(
                id="side-rice",
                name="אורז",
                category=Category.SIDES,
                measurement_type=MeasurementType.SIZE,
                preparations=(Preparation(id="p-yellow", name="צהוב"),),
            ),
            CatalogItem(
                id="side-potato",
                name="תפוחי אדמה",
                category=Category.SIDES,
                measurement_type=MeasurementType.SIZE,
                variations=(
                    Variation(id="var-baked", name="אפוי"),
                    Variation(id="var-fried", name="מטוגן"),
                ),
            ),
            CatalogItem(
                id="main-schnitzel",
                name="שניצל",
                category=Category.MAINS,
                measurement_type=MeasurementType.NONE,
                preparations=(Preparation(id="p-fried", name="מטוגן"),),
            ),
            CatalogItem(
                id="main-chicken",
                name="עוף",
                category=Category.MAINS,
                measurement_type=MeasurementType.QUANTITY,
                portion_multiplier=2,
                portion_unit="חצאים",
            ),
            CatalogItem(
                id="extra-drinks",
                name="שתייה",
                category=Category.EXTRAS,
            ),
            CatalogItem(
                id="bak-challah",
                name="חלה",
                category=Category.BAKERY,
            ),
        ),
    )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    catalog: Catalog = field(default_factory=build_catalog)
    loads: int = 0

    def load_catalog(self) -> Catalog:
        self.loads += 1
        return self.catalog


@dataclass
class InMemoryOrderRepository(OrderRepository):
    """In-memory order repository for tests."""

    orders: dict[str, StoredOrder] = field(default_factory=dict)
    drafts: list[OrderDraft] = field(default_factory=list)
    next_number: int = 1000

    def load_order(self, order_id: str) -> StoredOrder | None:
        return self.orders.get(order_id)

    def save_order(self, draft: OrderDraft) -> SaveResult:
        self.drafts.append(draft)
        order_id = str(uuid4())
        order_number = self.next_number
        self.next_number += 1
        self.orders[order_id] = StoredOrder(
            id=order_id,
            order_number=order_number,
            customer=replace(draft.customer),
            pricing=replace(draft.pricing),
            rows=list(draft.rows),
            extra_rows=list(draft.extra_rows),
        )
        return SaveResult(order_id=order_id, order_number=order_number)

    def update_order(self, order_id: str, draft: OrderDraft) -> SaveResult:
        existing = self.orders.get(order_id)
        if existing is None:
            raise OrderNotFoundError(order_id)
        self.drafts.append(draft)
        self.orders[order_id] = replace(
            existing,
            customer=replace(draft.customer),
            pricing=replace(draft.pricing),
            rows=list(draft.rows),
            extra_rows=list(draft.extra_rows),
        )
        return SaveResult(order_id=order_id, order_number=existing.order_number)

    def find_orders_by_phone(self, phone: str) -> list[OrderSummary]:
        matches = [o for o in self.orders.values() if o.customer.phone == phone]
        matches.sort(key=lambda o: o.order_number or 0, reverse=True)
        return [_summary(order) for order in matches]

    def list_orders(self, date_from: str, date_to: str) -> list[OrderSummary]:
        matches = [
            order
            for order in self.orders.values()
            if date_from <= order.customer.order_date <= date_to
        ]
        matches.sort(key=lambda o: (o.customer.order_date, o.customer.order_time))
        return [_summary(order) for order in matches]

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        existing = self.orders.get(order_id)
        if existing is None:
            raise OrderNotFoundError(order_id)
        self.orders[order_id] = replace(existing, status=status)


def _summary(order: StoredOrder) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        order_number=order.order_number,
        status=order.status,
        order_date=order.customer.order_date,
        order_time=order.customer.order_time,
        customer_name=order.customer.name,
        customer_phone=order.customer.phone,
        delivery_address=order.customer.delivery_address,
    )


@dataclass
class FailingOrderRepository(OrderRepository):
    """Order repository whose every call fails at the boundary."""

    message: str = "connection refused"

    def load_order(self, order_id: str) -> StoredOrder | None:
        raise BoundaryError(self.message)

    def save_order(self, draft: OrderDraft) -> SaveResult:
        raise BoundaryError(self.message)

    def update_order(self, order_id: str, draft: OrderDraft) -> SaveResult:
        raise BoundaryError(self.message)

    def find_orders_by_phone(self, phone: str) -> list[OrderSummary]:
        raise BoundaryError(self.message)

    def list_orders(self, date_from: str, date_to: str) -> list[OrderSummary]:
        raise BoundaryError(self.message)

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        raise BoundaryError(self.message)


@pytest.fixture
def catalog() -> Catalog:
    return build_catalog()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def order_service(
    order_repository: InMemoryOrderRepository,
    catalog_repository: InMemoryCatalogRepository,
) -> OrderService:
    return OrderService(
        repository=order_repository,
        catalog_repository=catalog_repository,
        linker=AddOnLinker(),
        cache=InMemoryCache(),
    )


@pytest.fixture
def container(settings: Settings, order_service: OrderService) -> AppContainer:
    return AppContainer(settings=settings, order_service=order_service)
