"""Pydantic models for the order editor HTTP payloads."""

from typing import Literal

from pydantic import BaseModel, Field

from catering_orders.domain.orders import OrderStatus


class CustomerModel(BaseModel):
    """Customer and delivery fields."""

    name: str = ""
    phone: str = ""
    phone_alt: str = ""
    address: str = ""
    order_date: str = ""
    order_time: str = ""
    customer_time: str = ""
    delivery_address: str = ""
    notes: str = ""


class PricingModel(BaseModel):
    """Scalars the total is derived from."""

    total_portions: int | None = Field(default=None, ge=0)
    price_per_portion: float | None = Field(default=None, ge=0)
    delivery_fee: float | None = Field(default=None, ge=0)


class VolumeQuantityModel(BaseModel):
    volume_id: str
    quantity: int = Field(default=0, ge=0)


class VariationQuantityModel(BaseModel):
    variation_id: str
    size_big: int = Field(default=0, ge=0)
    size_small: int = Field(default=0, ge=0)


class AddOnModel(BaseModel):
    add_on_id: str
    quantity: int = Field(default=0, ge=0)
    volumes: list[VolumeQuantityModel] = Field(default_factory=list)


class EntryModel(BaseModel):
    """Editor state of one catalog item.

    Only the fields matching the item's measurement discipline are read.
    """

    food_item_id: str
    selected: bool = False
    quantity: int | None = Field(default=None, ge=0)
    volumes: list[VolumeQuantityModel] = Field(default_factory=list)
    size_big: int | None = Field(default=None, ge=0)
    size_small: int | None = Field(default=None, ge=0)
    variations: list[VariationQuantityModel] = Field(default_factory=list)
    add_ons: list[AddOnModel] = Field(default_factory=list)
    preparation_id: str | None = None
    note: str = ""
    price: float | None = None


class ExtraVariationModel(BaseModel):
    variation_id: str
    name: str = ""
    size_big: int = Field(default=0, ge=0)
    size_small: int = Field(default=0, ge=0)


class ExtraRequestModel(BaseModel):
    """An "add as extra" action."""

    source_food_item_id: str
    price: float = Field(default=0.0, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    size_big: int | None = Field(default=None, ge=0)
    size_small: int | None = Field(default=None, ge=0)
    variations: list[ExtraVariationModel] = Field(default_factory=list)
    note: str | None = None


class OrderStateRequest(BaseModel):
    """Full editor state submitted for save, update or quote."""

    customer: CustomerModel = Field(default_factory=CustomerModel)
    pricing: PricingModel = Field(default_factory=PricingModel)
    entries: list[EntryModel] = Field(default_factory=list)
    extras: list[ExtraRequestModel] = Field(default_factory=list)


class EntryStateModel(EntryModel):
    category: str
    measurement: str
    preparation_name: str | None = None
    portion_total: str | None = None


class ExtraStateModel(BaseModel):
    id: str
    source_food_item_id: str
    source_category: str
    name: str
    price: float
    quantity: int | None = None
    size_big: int | None = None
    size_small: int | None = None
    variations: list[ExtraVariationModel] = Field(default_factory=list)
    note: str | None = None
    preparation_name: str | None = None


class WarningModel(BaseModel):
    food_item_id: str
    reason: str


class OrderStateResponse(BaseModel):
    """Editor state as rebuilt by the server."""

    order_id: str | None = None
    order_number: int | None = None
    customer: CustomerModel
    pricing: PricingModel
    entries: list[EntryStateModel]
    extras: list[ExtraStateModel]
    warnings: list[WarningModel] = Field(default_factory=list)
    total: float | None = None


class SaveResponse(BaseModel):
    order_id: str
    order_number: int | None = None


class QuoteResponse(BaseModel):
    total: float | None = None


class CatalogVolumeModel(BaseModel):
    id: str
    label: str


class CatalogAddOnModel(BaseModel):
    id: str
    name: str
    linked_food_item_id: str | None = None


class CatalogOptionModel(BaseModel):
    id: str
    name: str


class CatalogItemModel(BaseModel):
    """Catalog descriptor with the discipline the editor should render."""

    id: str
    name: str
    category: str
    measurement: Literal["quantity", "liters", "size", "variations"]
    volumes: list[CatalogVolumeModel] = Field(default_factory=list)
    variations: list[CatalogOptionModel] = Field(default_factory=list)
    add_ons: list[CatalogAddOnModel] = Field(default_factory=list)
    preparations: list[CatalogOptionModel] = Field(default_factory=list)
    portion_multiplier: float | None = None
    portion_unit: str | None = None


class CatalogResponse(BaseModel):
    items: list[CatalogItemModel]
    volumes: list[CatalogVolumeModel]


class OrderSummaryModel(BaseModel):
    id: str
    order_number: int | None = None
    status: OrderStatus
    order_date: str
    order_time: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    delivery_address: str = ""


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryModel]


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
