"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from catering_orders.api.order_models import (
    AddOnModel,
    CatalogAddOnModel,
    CatalogItemModel,
    CatalogOptionModel,
    CatalogResponse,
    CatalogVolumeModel,
    CustomerModel,
    EntryModel,
    EntryStateModel,
    ExtraStateModel,
    ExtraVariationModel,
    OrderListResponse,
    OrderStateRequest,
    OrderStateResponse,
    OrderSummaryModel,
    PricingModel,
    QuoteResponse,
    SaveResponse,
    StatusUpdateRequest,
    VariationQuantityModel,
    VolumeQuantityModel,
    WarningModel,
)
from catering_orders.app_logging import configure_logging
from catering_orders.containers import AppContainer
from catering_orders.domain.catalog import Catalog, CatalogItem, format_portion_total
from catering_orders.domain.extras import ExtraItem, ExtraPayload, ExtraVariation
from catering_orders.domain.measurements import (
    Liters,
    Quantity,
    Size,
    Variations,
    discipline_name,
    measurement_for,
)
from catering_orders.domain.orders import CustomerFields, OrderSummary, PricingFields
from catering_orders.domain.selection import SelectionEntry
from catering_orders.errors import (
    BoundaryError,
    CateringOrdersError,
    OrderNotFoundError,
    SessionClosedError,
    ValidationError,
)
from catering_orders.services.selection import SelectionStore
from catering_orders.services.sessions import OrderSession

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.order_service.catalog()
        except BoundaryError:
            logger.exception("Failed to warm the catalog cache")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(BoundaryError)
    async def boundary_error(_: Request, exc: BoundaryError) -> JSONResponse:
        logger.error("Persistence boundary failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)}
        )

    @app.exception_handler(OrderNotFoundError)
    async def not_found(_: Request, exc: OrderNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"Order {exc} not found"},
        )

    @app.exception_handler(SessionClosedError)
    async def session_closed(_: Request, exc: SessionClosedError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(CateringOrdersError)
    async def order_error(_: Request, exc: CateringOrdersError) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def value_error(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=_UNPROCESSABLE, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/catalog")
    async def catalog(request: Request) -> CatalogResponse:
        """Return the active catalog with the discipline of each item."""
        state_container: AppContainer = request.app.state.container
        return _catalog_response(state_container.order_service.catalog())

    @app.get("/orders")
    async def list_orders(
        request: Request,
        phone: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> OrderListResponse:
        """Find orders by customer phone or by an order date range."""
        state_container: AppContainer = request.app.state.container
        service = state_container.order_service
        if phone is not None:
            summaries = await service.find_by_phone(phone)
        elif date_from is not None and date_to is not None:
            summaries = await service.list_orders(
                date_from.isoformat(), date_to.isoformat()
            )
        else:
            raise ValidationError("phone", "Pass a phone or a date range")
        return OrderListResponse(orders=[_summary_model(s) for s in summaries])

    @app.patch("/orders/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
    async def update_status(
        order_id: str, payload: StatusUpdateRequest, request: Request
    ) -> None:
        """Move an order to another status, e.g. cancel it."""
        state_container: AppContainer = request.app.state.container
        await state_container.order_service.update_status(order_id, payload.status)

    @app.get("/orders/{order_id}")
    async def get_order(order_id: str, request: Request) -> OrderStateResponse:
        """Rebuild a stored order's editor state."""
        state_container: AppContainer = request.app.state.container
        service = state_container.order_service
        session = await service.open_existing(order_id)
        if session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        response = _state_response(session)
        service.discard(session)
        return response

    @app.post("/orders", status_code=status.HTTP_201_CREATED)
    async def create_order(
        payload: OrderStateRequest, request: Request
    ) -> SaveResponse:
        """Create an order from a full editor state."""
        state_container: AppContainer = request.app.state.container
        service = state_container.order_service
        session = service.open_new()
        _apply_state(session, payload)
        result = await service.save(session)
        return SaveResponse(order_id=result.order_id, order_number=result.order_number)

    @app.put("/orders/{order_id}")
    async def update_order(
        order_id: str, payload: OrderStateRequest, request: Request
    ) -> SaveResponse:
        """Replace an order with a full editor state."""
        state_container: AppContainer = request.app.state.container
        service = state_container.order_service
        session = service.open_new()
        _apply_state(session, payload)
        result = await service.update(order_id, session)
        return SaveResponse(order_id=result.order_id, order_number=result.order_number)

    @app.post("/orders/quote")
    async def quote_order(
        payload: OrderStateRequest, request: Request
    ) -> QuoteResponse:
        """Compute the payable total of an unsaved editor state."""
        state_container: AppContainer = request.app.state.container
        service = state_container.order_service
        session = service.open_new()
        _apply_state(session, payload)
        total = session.total()
        service.discard(session)
        return QuoteResponse(total=total)

    return app


def _apply_state(session: OrderSession, state: OrderStateRequest) -> None:
    session.customer = CustomerFields(**state.customer.model_dump())
    session.pricing = PricingFields(**state.pricing.model_dump())
    store = session.selection
    for entry_state in state.entries:
        _apply_entry(store, entry_state)
    for extra in state.extras:
        session.add_extra(
            extra.source_food_item_id,
            ExtraPayload(
                quantity=extra.quantity,
                size_big=extra.size_big,
                size_small=extra.size_small,
                variations=tuple(
                    ExtraVariation(
                        variation_id=v.variation_id,
                        name=v.name,
                        size_big=v.size_big,
                        size_small=v.size_small,
                    )
                    for v in extra.variations
                ),
            ),
            price=extra.price,
            note=extra.note,
        )


def _apply_entry(store: SelectionStore, state: EntryModel) -> None:
    item_id = state.food_item_id
    entry = store.entry(item_id)
    match entry.measurement:
        case Quantity():
            if state.quantity is not None:
                store.set_regular_quantity(item_id, state.quantity)
        case Liters():
            for volume in state.volumes:
                store.set_volume_quantity(item_id, volume.volume_id, volume.quantity)
        case Size():
            if state.size_big is not None:
                store.set_size(item_id, "big", state.size_big)
            if state.size_small is not None:
                store.set_size(item_id, "small", state.size_small)
        case Variations():
            for variation in state.variations:
                store.set_variation_size(
                    item_id, variation.variation_id, "big", variation.size_big
                )
                store.set_variation_size(
                    item_id, variation.variation_id, "small", variation.size_small
                )
    for add_on in state.add_ons:
        store.set_add_on_quantity(item_id, add_on.add_on_id, add_on.quantity)
        for volume in add_on.volumes:
            store.set_add_on_volume(
                item_id, add_on.add_on_id, volume.volume_id, volume.quantity
            )
    # Liters and variations items may be open in the editor with nothing picked.
    if (
        state.selected
        and not entry.selected
        and isinstance(entry.measurement, Liters | Variations)
    ):
        store.toggle(item_id, True)
    if state.note:
        store.set_note(item_id, state.note)
    if state.preparation_id:
        store.set_preparation(item_id, state.preparation_id)
    if state.price is not None:
        store.set_price(item_id, state.price)


def _state_response(session: OrderSession) -> OrderStateResponse:
    catalog = session.catalog
    return OrderStateResponse(
        order_id=session.order_id,
        order_number=session.order_number,
        customer=CustomerModel(**asdict(session.customer)),
        pricing=PricingModel(**asdict(session.pricing)),
        entries=[
            _entry_state(entry, catalog.item(entry.food_item_id))
            for entry in session.selection.entries()
            if entry.selected or entry.note
        ],
        extras=[_extra_state(extra) for extra in session.extras.entries],
        warnings=[
            WarningModel(food_item_id=w.food_item_id, reason=w.reason)
            for w in session.warnings
        ],
        total=session.total(),
    )


def _entry_state(entry: SelectionEntry, item: CatalogItem | None) -> EntryStateModel:
    state = EntryStateModel(
        food_item_id=entry.food_item_id,
        category=entry.category.value,
        measurement=discipline_name(entry.measurement),
        selected=entry.selected,
        add_ons=[
            AddOnModel(
                add_on_id=add_on.add_on_id,
                quantity=add_on.quantity,
                volumes=[
                    VolumeQuantityModel(volume_id=v.volume_id, quantity=v.quantity)
                    for v in add_on.volumes
                ],
            )
            for add_on in entry.add_ons
            if add_on.has_quantity()
        ],
        preparation_id=entry.preparation_id,
        preparation_name=entry.preparation_name,
        note=entry.note,
        price=entry.price,
    )
    match entry.measurement:
        case Quantity(count=count):
            state.quantity = count
            state.portion_total = format_portion_total(item, count) if item else None
        case Liters(volumes=volumes):
            state.volumes = [
                VolumeQuantityModel(volume_id=v.volume_id, quantity=v.quantity)
                for v in volumes
            ]
        case Size(big=big, small=small):
            state.size_big = big
            state.size_small = small
        case Variations(variations=variations):
            state.variations = [
                VariationQuantityModel(
                    variation_id=v.variation_id,
                    size_big=v.size_big,
                    size_small=v.size_small,
                )
                for v in variations
            ]
    return state


def _extra_state(extra: ExtraItem) -> ExtraStateModel:
    return ExtraStateModel(
        id=extra.id,
        source_food_item_id=extra.source_food_item_id,
        source_category=extra.source_category.value,
        name=extra.name,
        price=extra.price,
        quantity=extra.quantity,
        size_big=extra.size_big,
        size_small=extra.size_small,
        variations=[
            ExtraVariationModel(
                variation_id=v.variation_id,
                name=v.name,
                size_big=v.size_big,
                size_small=v.size_small,
            )
            for v in extra.variations or []
        ],
        note=extra.note,
        preparation_name=extra.preparation_name,
    )


def _summary_model(summary: OrderSummary) -> OrderSummaryModel:
    return OrderSummaryModel(**asdict(summary))


def _catalog_response(catalog: Catalog) -> CatalogResponse:
    return CatalogResponse(
        items=[
            CatalogItemModel(
                id=item.id,
                name=item.name,
                category=item.category.value,
                measurement=discipline_name(  # type: ignore[arg-type]
                    measurement_for(item, catalog.volumes)
                ),
                volumes=_item_volumes(catalog, item),
                variations=[
                    CatalogOptionModel(id=v.id, name=v.name) for v in item.variations
                ],
                add_ons=[
                    CatalogAddOnModel(
                        id=a.id, name=a.name, linked_food_item_id=a.linked_food_item_id
                    )
                    for a in item.add_ons
                ],
                preparations=[
                    CatalogOptionModel(id=p.id, name=p.name) for p in item.preparations
                ],
                portion_multiplier=item.portion_multiplier,
                portion_unit=item.portion_unit,
            )
            for item in catalog.items
        ],
        volumes=[
            CatalogVolumeModel(id=volume.id, label=volume.label)
            for volume in catalog.volumes
        ],
    )


def _item_volumes(catalog: Catalog, item: CatalogItem) -> list[CatalogVolumeModel]:
    measurement = measurement_for(item, catalog.volumes)
    if not isinstance(measurement, Liters):
        return []
    return [
        CatalogVolumeModel(
            id=slot.volume_id, label=catalog.volume_label(slot.volume_id, item)
        )
        for slot in measurement.volumes
    ]
