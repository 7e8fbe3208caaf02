# tests/unit/services/test_inventory_service.py
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from stockroom.core.exceptions import (
    InsufficientStockError,
    ItemCreationError,
    ItemInUseError,
    ItemNotFoundError,
    ValidationError,
)
from stockroom.integrations.stock_subject import StockSubject
from stockroom.schemas.inventory import ItemCreate, ItemUpdate
from stockroom.services.inventory_service import InventoryService
from tests.mocks.mock_observer import RecordingObserver


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def service(repository, observer):
    subject = StockSubject(repository)
    subject.register(observer)
    return InventoryService(repository, subject)


# --- CRUD ---

@pytest.mark.asyncio
async def test_create_item_assigns_id(service):
    item = await service.create_item(ItemCreate(name="Gadget", quantity=3, price="9.99", sku="GAD-001"))

    assert item.id == 2
    assert item.price == Decimal("9.99")
    assert (await service.get_item(2)).name == "Gadget"


@pytest.mark.asyncio
async def test_create_item_rejects_duplicate_sku(service):
    with pytest.raises(ItemCreationError):
        await service.create_item(ItemCreate(name="Clone", price="1.00", sku="WID-001"))


@pytest.mark.asyncio
async def test_create_item_does_not_notify(service, observer):
    await service.create_item(ItemCreate(name="Gadget", quantity=3, price="9.99"))
    assert observer.calls == []


@pytest.mark.asyncio
async def test_get_item_missing_returns_none(service):
    assert await service.get_item(404) is None
    with pytest.raises(ItemNotFoundError):
        await service.require_item(404)


@pytest.mark.asyncio
async def test_update_item_changes_fields_but_not_quantity(service, observer):
    updated = await service.update_item(1, ItemUpdate(name="Widget Pro", price="6.50"))

    assert updated.name == "Widget Pro"
    assert updated.price == Decimal("6.50")
    assert updated.quantity == 12
    assert observer.calls == []


@pytest.mark.asyncio
async def test_update_item_rejects_sku_of_another_item(service):
    await service.create_item(ItemCreate(name="Gadget", price="1.00", sku="GAD-001"))
    with pytest.raises(ValidationError):
        await service.update_item(1, ItemUpdate(sku="GAD-001"))


@pytest.mark.asyncio
async def test_update_item_keeps_own_sku(service):
    updated = await service.update_item(1, ItemUpdate(sku="WID-001", description="Blue"))
    assert updated.description == "Blue"


def test_update_payload_rejects_null_name_and_price():
    with pytest.raises(PydanticValidationError):
        ItemUpdate(name=None)
    with pytest.raises(PydanticValidationError):
        ItemUpdate(price=None)


@pytest.mark.asyncio
async def test_update_item_revalidates_merged_item(service, repository):
    # model_construct skips the payload validators
    with pytest.raises(ValidationError):
        await service.update_item(1, ItemUpdate.model_construct(name=None, _fields_set={"name"}))

    stored = await repository.find_by_id(1)
    assert stored.name == "Widget"
    assert stored.price == Decimal("5.00")


@pytest.mark.asyncio
async def test_delete_item(service):
    await service.delete_item(1)
    assert await service.get_item(1) is None


@pytest.mark.asyncio
async def test_delete_item_with_history_is_refused(service, repository):
    repository.mark_referenced(1)
    with pytest.raises(ItemInUseError):
        await service.delete_item(1)
    assert await service.get_item(1) is not None


@pytest.mark.asyncio
async def test_delete_missing_item(service):
    with pytest.raises(ItemNotFoundError):
        await service.delete_item(404)


@pytest.mark.asyncio
async def test_list_items_with_threshold_is_inclusive(service, repository):
    for item_id, quantity in [(2, 10), (3, 11), (4, 0)]:
        await repository.add(ItemCreate(name=f"Item {item_id}", quantity=quantity, price="1.00"))

    assert len(await service.list_items()) == 4
    low = await service.list_items(low_stock_threshold=10)
    assert sorted(item.quantity for item in low) == [0, 10]
    assert [item.id for item in await service.get_low_stock_items()] == [item.id for item in low]


# --- Stock workflows ---

@pytest.mark.asyncio
async def test_record_sale_decrements(service, observer):
    item = await service.record_sale(1, 4)

    assert item.quantity == 8
    assert observer.calls == [(1, 12, 8)]


@pytest.mark.asyncio
async def test_receive_shipment_increments(service, observer):
    item = await service.receive_shipment(1, 50)

    assert item.quantity == 62
    assert observer.calls == [(1, 12, 62)]


@pytest.mark.asyncio
async def test_adjust_stock_is_signed(service):
    assert (await service.adjust_stock(1, -2)).quantity == 10
    assert (await service.adjust_stock(1, 5)).quantity == 15


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["record_sale", "receive_shipment"])
@pytest.mark.parametrize("quantity", [0, -3])
async def test_movements_require_positive_quantity(service, observer, method, quantity):
    with pytest.raises(ValidationError):
        await getattr(service, method)(1, quantity)
    assert observer.calls == []


@pytest.mark.asyncio
async def test_sale_beyond_stock_fails(service):
    with pytest.raises(InsufficientStockError):
        await service.record_sale(1, 13)
    assert (await service.get_item(1)).quantity == 12


@pytest.mark.asyncio
async def test_low_stock_items_default_to_configured_threshold(repository):
    await repository.add(ItemCreate(name="Sprocket", quantity=6, price="1.00"))
    service = InventoryService(repository, StockSubject(repository), low_stock_threshold=6)

    assert [item.name for item in await service.get_low_stock_items()] == ["Sprocket"]
    assert len(await service.get_low_stock_items(threshold=12)) == 2
