"""
Tests for the WalletStore.

Integration tests use InMemoryStorage behind a real DocumentGateway.
"""

import asyncio
import json

import pytest

from ewallet.audit import AuditLogger
from ewallet.config import DEFAULT_DOCUMENT_KEY
from ewallet.models.audit import AuditEventType
from ewallet.models.commands import (
    AddCard,
    AddCategory,
    ApplyFundOperation,
    DeleteCard,
    LoadData,
)
from ewallet.models.wallet import (
    CategoryListType,
    CreditCard,
    DebitCard,
    Document,
    Transaction,
    default_document,
)
from ewallet.services.storage import (
    DocumentGateway,
    InMemoryStorage,
    StorageWriteError,
)
from ewallet.store import CommandError, WalletStore


def fund(transaction_id, operation, amount, card_id="1", category=""):
    return ApplyFundOperation(transaction=Transaction(
        id=transaction_id,
        operation=operation,
        amount=amount,
        date="01/15/2025",
        card_id=card_id,
        card_name="Main Debit Card",
        category=category,
    ))


def stored_document(storage):
    return json.loads(storage.snapshot()[DEFAULT_DOCUMENT_KEY])


def event_types(store):
    return [e.event_type for e in store.audit_logger.recent_events()]


class GatedStorage(InMemoryStorage):
    """Reads the stored value, then holds it until the gate opens."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.gate = asyncio.Event()

    async def get_item(self, key):
        value = await super().get_item(key)
        await self.gate.wait()
        return value


class BrokenStorage(InMemoryStorage):

    async def set_item(self, key, value):
        raise StorageWriteError("disk full")


class CrashingStorage(InMemoryStorage):

    async def set_item(self, key, value):
        raise RuntimeError("unexpected")


class TestDispatch:
    """Tests for applying commands without persistence."""

    def test_starts_from_seed(self):
        store = WalletStore()
        assert store.document == default_document()
        assert store.commands_applied == 0

    def test_dispatch_replaces_document(self):
        store = WalletStore()
        before = store.document
        after = store.dispatch(fund(1, "add", 500))
        assert store.document is after
        assert after.find_card("1").balance == 3000.0
        assert before.find_card("1").balance == 2500.0
        assert store.commands_applied == 1

    def test_rejected_command_leaves_document(self):
        """Test a failing command changes nothing and is audited."""
        store = WalletStore()
        before = store.document
        with pytest.raises(CommandError):
            store.dispatch(fund(1, "add", 5, card_id="missing"))
        assert store.document is before
        assert store.commands_applied == 0
        assert event_types(store)[0] == AuditEventType.COMMAND_REJECTED

    def test_applied_command_is_audited(self):
        store = WalletStore()
        store.dispatch(DeleteCard(card_id="1"))
        event = store.audit_logger.recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.COMMAND_APPLIED
        assert event.command == "DeleteCard"
        assert event.entity_id == "1"

    def test_load_data_not_counted(self):
        store = WalletStore()
        store.dispatch(LoadData(document=Document()))
        assert store.commands_applied == 0
        assert store.document.cards == ()

    def test_subscribers_notified(self):
        store = WalletStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        document = store.dispatch(DeleteCard(card_id="1"))
        unsubscribe()
        store.dispatch(AddCard(card=DebitCard(id="2", name="B")))
        assert seen == [document]

    def test_failing_subscriber_does_not_fail_dispatch(self):
        """Test an applied command stays applied when a listener raises."""
        store = WalletStore()
        seen = []

        def broken(document):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)
        document = store.dispatch(
            AddCategory(list_type=CategoryListType.ADD_FUND, name="X")
        )

        assert store.document is document
        assert "X" in document.categories.add_fund_categories
        assert seen == [document]

    def test_subscribers_not_notified_on_failure(self):
        store = WalletStore()
        seen = []
        store.subscribe(seen.append)
        with pytest.raises(CommandError):
            store.dispatch(fund(1, "add", 1, card_id="x"))
        assert seen == []

    def test_seed_scenario(self):
        """Test add $500 then subtract $4000 on the seed card."""
        store = WalletStore()
        store.dispatch(fund(1, "add", 500, category="Salary"))
        card = store.document.find_card("1")
        assert card.balance == 3000.0
        history = store.document.transaction_history
        assert len(history) == 1
        assert history[0].operation.value == "add"
        assert history[0].amount == 500.0
        assert history[0].category == "Salary"

        store.dispatch(fund(2, "subtract", 4000))
        assert store.document.find_card("1").balance == 0.0
        history = store.document.transaction_history
        assert [t.operation.value for t in history] == ["subtract", "add"]
        assert history[0].amount == 4000.0


class TestPersistence:
    """Tests for fire-and-forget saves through the gateway."""

    def test_sync_dispatch_saves_immediately(self):
        """Test a dispatch outside an event loop persists before returning."""
        storage = InMemoryStorage()
        store = WalletStore(gateway=DocumentGateway(storage))
        store.dispatch(AddCard(card=CreditCard(id="2", name="Visa", credit_limit=100)))

        stored = stored_document(storage)
        assert [c["id"] for c in stored["cards"]] == ["1", "2"]
        assert AuditEventType.DOCUMENT_SAVED in event_types(store)

    def test_rejected_command_not_saved(self):
        storage = InMemoryStorage()
        store = WalletStore(gateway=DocumentGateway(storage))
        with pytest.raises(CommandError):
            store.dispatch(fund(1, "add", 5, card_id="missing"))
        assert storage.write_count == 0

    def test_burst_of_commands_ends_with_latest_state(self):
        """Test overlapping saves settle on the current Document."""
        storage = InMemoryStorage()

        async def scenario():
            store = WalletStore(gateway=DocumentGateway(storage))
            for i in range(1, 6):
                store.dispatch(fund(i, "add", 10))
            assert store.pending_writes > 0
            await store.flush()
            assert store.pending_writes == 0
            return store

        store = asyncio.run(scenario())
        stored = stored_document(storage)
        assert stored == store.document.to_document_dict()
        assert stored["cards"][0]["balance"] == 2550.0
        assert len(stored["transactionHistory"]) == 5

    def test_save_failure_keeps_state(self):
        """Test a failed write is audited and the in-memory state survives."""
        store = WalletStore(gateway=DocumentGateway(BrokenStorage()))
        store.dispatch(fund(1, "add", 5))
        assert store.document.find_card("1").balance == 2505.0
        assert event_types(store)[0] == AuditEventType.SAVE_FAILED

    def test_unexpected_save_error_is_contained(self):
        store = WalletStore(gateway=DocumentGateway(CrashingStorage()))
        store.dispatch(fund(1, "add", 5))
        assert store.document.find_card("1").balance == 2505.0
        event = store.audit_logger.recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.error_message == "unexpected"


class TestBootstrap:
    """Tests for the one-time load at start-up."""

    def test_nothing_stored_keeps_seed(self):
        store = WalletStore(gateway=DocumentGateway(InMemoryStorage()))
        document = asyncio.run(store.bootstrap())
        assert document == default_document()
        assert AuditEventType.DOCUMENT_SEEDED in event_types(store)

    def test_corrupt_value_keeps_seed(self):
        storage = InMemoryStorage({DEFAULT_DOCUMENT_KEY: "{broken"})
        store = WalletStore(gateway=DocumentGateway(storage))
        assert asyncio.run(store.bootstrap()) == default_document()

    def test_stored_document_loaded(self):
        """Test LoadData round-trips the stored Document structurally."""
        saved = Document(cards=(DebitCard(id="7", name="Stored", balance=1),))
        storage = InMemoryStorage({DEFAULT_DOCUMENT_KEY: json.dumps(saved.to_document_dict())})
        store = WalletStore(gateway=DocumentGateway(storage))

        asyncio.run(store.bootstrap())

        assert store.document == saved
        assert store.document.to_document_dict() == saved.to_document_dict()
        assert store.commands_applied == 0
        assert AuditEventType.DOCUMENT_LOADED in event_types(store)

    def test_late_load_ignored(self):
        """Test a load finishing after a command does not overwrite state."""
        saved = Document(cards=(DebitCard(id="7", name="Stored", balance=1),))
        storage = GatedStorage({DEFAULT_DOCUMENT_KEY: json.dumps(saved.to_document_dict())})

        async def scenario():
            store = WalletStore(gateway=DocumentGateway(storage))
            loading = asyncio.create_task(store.bootstrap())
            await asyncio.sleep(0)
            store.dispatch(fund(1, "add", 5))
            storage.gate.set()
            await loading
            await store.flush()
            return store

        store = asyncio.run(scenario())
        assert store.document.find_card("7") is None
        assert store.document.find_card("1").balance == 2505.0
        assert AuditEventType.LATE_LOAD_IGNORED in event_types(store)

    def test_without_gateway(self):
        store = WalletStore()
        assert asyncio.run(store.bootstrap()) is store.document


class TestAuditLogger:

    def test_history_is_bounded(self):
        audit = AuditLogger(history_size=2)
        store = WalletStore(audit_logger=audit)
        for i in range(3):
            store.dispatch(AddCard(card=DebitCard(id=f"c{i}", name="Card")))
        events = audit.recent_events()
        assert [e.entity_id for e in events] == ["c2", "c1"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
