# tests/unit/integrations/test_stock_subject.py
import asyncio
import logging

import pytest

from stockroom.core.exceptions import InsufficientStockError, ItemNotFoundError, StaleItemError, ValidationError
from stockroom.integrations.events import StockChangeEvent
from stockroom.integrations.stock_subject import StockSubject
from stockroom.services.item_repository import InMemoryItemRepository
from tests.mocks.items import make_item
from tests.mocks.mock_observer import FailingObserver, RecordingObserver, SyncObserver


@pytest.fixture
def subject(repository):
    return StockSubject(repository)


# --- Registry ---

def test_register_is_idempotent(subject):
    observer = RecordingObserver()
    subject.register(observer)
    subject.register(observer)
    assert subject.observers == (observer,)


def test_unregister_unknown_observer_is_a_no_op(subject):
    registered = RecordingObserver("a")
    subject.register(registered)
    subject.unregister(RecordingObserver("b"))
    assert subject.observers == (registered,)


def test_get_observer_by_name(subject):
    observer = RecordingObserver("dashboard")
    subject.register(observer)
    assert subject.get_observer("dashboard") is observer
    assert subject.get_observer("missing") is None


@pytest.mark.asyncio
async def test_unregistered_observer_is_not_notified(subject):
    observer = RecordingObserver()
    subject.register(observer)
    subject.unregister(observer)

    await subject.apply_quantity_delta(1, -2)

    assert observer.calls == []


# --- Mutation ---

@pytest.mark.asyncio
async def test_decrement_persists_and_notifies_once(subject, repository):
    observer = RecordingObserver()
    subject.register(observer)

    updated = await subject.apply_quantity_delta(1, -4)

    assert updated.quantity == 8
    assert (await repository.find_by_id(1)).quantity == 8
    assert observer.calls == [(1, 12, 8)]


@pytest.mark.asyncio
async def test_observer_sees_committed_snapshot(subject, repository):
    seen = []

    class ReadBack(RecordingObserver):
        async def on_stock_change(self, item, old_quantity, new_quantity):
            stored = await repository.find_by_id(item.id)
            seen.append((item.quantity, stored.quantity))

    subject.register(ReadBack())
    await subject.apply_quantity_delta(1, 3)

    assert seen == [(15, 15)]


@pytest.mark.asyncio
async def test_observers_called_in_registration_order(subject):
    call_log = []
    for label in ["first", "second", "third"]:
        subject.register(RecordingObserver(label, call_log))

    await subject.apply_quantity_delta(1, -1)

    assert call_log == ["first", "second", "third"]


@pytest.mark.asyncio
async def test_failing_observer_does_not_stop_the_rest(subject, repository, caplog):
    call_log = []
    before = RecordingObserver("before", call_log)
    failing = FailingObserver("failing", call_log)
    after = RecordingObserver("after", call_log)
    for observer in [before, failing, after]:
        subject.register(observer)

    with caplog.at_level(logging.ERROR):
        updated = await subject.apply_quantity_delta(1, -2)

    assert updated.quantity == 10
    assert (await repository.find_by_id(1)).quantity == 10
    assert call_log == ["before", "failing", "after"]
    assert subject.failure_counts["failing"] == 1
    assert "Error in observer failing" in caplog.text


@pytest.mark.asyncio
async def test_sync_observer_is_supported(subject):
    observer = SyncObserver()
    subject.register(observer)

    await subject.apply_quantity_delta(1, 5)

    assert observer.calls == [(12, 17)]


@pytest.mark.asyncio
async def test_unknown_item_raises_not_found_and_notifies_nobody(subject):
    observer = RecordingObserver()
    subject.register(observer)

    with pytest.raises(ItemNotFoundError) as exc_info:
        await subject.apply_quantity_delta(999, -1)

    assert exc_info.value.item_id == 999
    assert observer.calls == []


@pytest.mark.asyncio
async def test_overdraw_raises_and_leaves_quantity_unchanged(subject, repository):
    observer = RecordingObserver()
    subject.register(observer)

    with pytest.raises(InsufficientStockError) as exc_info:
        await subject.apply_quantity_delta(1, -13)

    assert exc_info.value.available == 12
    assert exc_info.value.requested == 13
    assert (await repository.find_by_id(1)).quantity == 12
    assert observer.calls == []


@pytest.mark.asyncio
async def test_decrement_to_exactly_zero_is_allowed(subject):
    observer = RecordingObserver()
    subject.register(observer)

    updated = await subject.apply_quantity_delta(1, -12)

    assert updated.quantity == 0
    assert observer.calls == [(1, 12, 0)]


@pytest.mark.asyncio
async def test_zero_delta_is_rejected(subject):
    observer = RecordingObserver()
    subject.register(observer)

    with pytest.raises(ValidationError):
        await subject.apply_quantity_delta(1, 0)

    assert observer.calls == []


@pytest.mark.asyncio
async def test_store_failure_propagates_without_notification(subject, repository, mocker):
    observer = RecordingObserver()
    subject.register(observer)
    mocker.patch.object(repository, "save", side_effect=StaleItemError("conflict"))

    with pytest.raises(StaleItemError):
        await subject.apply_quantity_delta(1, -1)

    assert observer.calls == []


@pytest.mark.asyncio
async def test_sequence_of_changes_reports_contiguous_transitions(subject):
    observer = RecordingObserver()
    subject.register(observer)

    for delta in [-4, -3, 10, -15]:
        await subject.apply_quantity_delta(1, delta)

    assert observer.calls == [(1, 12, 8), (1, 8, 5), (1, 5, 15), (1, 15, 0)]
    for (_, _, previous_new), (_, next_old, _) in zip(observer.calls, observer.calls[1:]):
        assert previous_new == next_old


@pytest.mark.asyncio
async def test_concurrent_decrements_never_overdraw():
    repository = InMemoryItemRepository([make_item(quantity=5)])
    subject = StockSubject(repository)
    observer = RecordingObserver()
    subject.register(observer)

    results = await asyncio.gather(
        *[subject.apply_quantity_delta(1, -1) for _ in range(8)],
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, InsufficientStockError)]
    assert len(successes) == 5
    assert len(failures) == 3
    assert (await repository.find_by_id(1)).quantity == 0
    assert [new for _, _, new in observer.calls] == [4, 3, 2, 1, 0]


@pytest.mark.asyncio
async def test_notify_all_reports_failures_without_raising(subject, widget):
    subject.register(RecordingObserver())
    subject.register(FailingObserver("failing", error=ValueError("bad template")))
    event = StockChangeEvent(item=widget, old_quantity=12, new_quantity=8)

    failures = await subject.notify_all(event)

    assert len(failures) == 1
    assert failures[0].observer_name == "failing"
    assert failures[0].error_type == "ValueError"
    assert failures[0].message == "bad template"
    assert (failures[0].old_quantity, failures[0].new_quantity) == (12, 8)


@pytest.mark.asyncio
async def test_notify_all_with_no_failures_returns_empty(subject, widget):
    subject.register(RecordingObserver())
    event = StockChangeEvent(item=widget, old_quantity=12, new_quantity=8)
    assert await subject.notify_all(event) == []


# --- Per-item locks ---

@pytest.mark.asyncio
async def test_item_locks_are_released_for_unknown_ids(subject):
    for item_id in range(1000, 1100):
        with pytest.raises(ItemNotFoundError):
            await subject.apply_quantity_delta(item_id, -1)

    assert subject._item_locks == {}
    assert not subject._lock_users


@pytest.mark.asyncio
async def test_item_locks_are_released_after_success_and_failure(subject):
    await subject.apply_quantity_delta(1, -2)
    with pytest.raises(InsufficientStockError):
        await subject.apply_quantity_delta(1, -100)

    assert subject._item_locks == {}


@pytest.mark.asyncio
async def test_item_locks_are_released_after_concurrent_changes():
    repository = InMemoryItemRepository([make_item(quantity=5)])
    subject = StockSubject(repository)

    await asyncio.gather(
        *[subject.apply_quantity_delta(1, -1) for _ in range(8)],
        return_exceptions=True,
    )

    assert subject._item_locks == {}
    assert not subject._lock_users
