"""
Tests for eWallet

Test strategy:
1. Unit tests for individual components (models, validators, reducer)
2. Integration tests for flows (with in-memory storage)
3. No real device storage or share targets in tests
"""

import pytest
from pydantic import ValidationError

from ewallet.models.wallet import (
    CARD_FUND,
    CategoryListType,
    CategorySet,
    CreditCard,
    DebitCard,
    Document,
    FundOperation,
    LedgerEntry,
    Summary,
    Transaction,
    card_adapter,
    default_document,
)
from ewallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ewallet.models.commands import AddCard, AddCategory, DeleteTransactionHistory


class TestCardModels:
    """Tests for the debit and credit card models."""

    def test_debit_card_from_document_dict(self):
        """Test a stored debit card is parsed into DebitCard."""
        card = card_adapter.validate_python({
            "id": "1",
            "name": "Main Debit Card",
            "type": "debit",
            "expiryDate": "09/26",
            "balance": 2500.0,
        })
        assert isinstance(card, DebitCard)
        assert card.kind == "debit"
        assert card.balance == 2500.0
        assert card.current_amount == 2500.0

    def test_credit_card_from_document_dict(self):
        """Test a stored credit card is parsed into CreditCard."""
        card = card_adapter.validate_python({
            "id": "c1",
            "name": "Visa",
            "type": "credit",
            "expiryDate": "12/28",
            "creditLimit": 5000,
            "currentSpending": 120.5,
            "paymentDate": "1st of each month",
        })
        assert isinstance(card, CreditCard)
        assert card.credit_limit == 5000.0
        assert card.current_amount == 120.5

    def test_card_serializes_with_wire_keys(self):
        """Test kind is written under "type" and fields are camelCase."""
        card = CreditCard(id="c1", name="Visa", credit_limit=1000, payment_date="15th")
        data = card.to_document_dict()
        assert data["type"] == "credit"
        assert data["creditLimit"] == 1000.0
        assert data["currentSpending"] == 0.0
        assert data["paymentDate"] == "15th"
        assert "balance" not in data

    def test_unknown_card_type_rejected(self):
        """Test the discriminator rejects unknown kinds."""
        with pytest.raises(ValidationError):
            card_adapter.validate_python({"id": "x", "name": "X", "type": "prepaid"})

    def test_stored_negative_amounts_accepted(self):
        """Test a stored card is taken as it is, even with a negative amount."""
        card = card_adapter.validate_python(
            {"id": "1", "name": "Test", "type": "debit", "balance": -50}
        )
        assert card.balance == -50.0

    def test_non_numeric_balance_rejected(self):
        with pytest.raises(ValueError):
            DebitCard(id="1", name="Test", balance="lots")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            DebitCard(id="1", name="")

    def test_cards_are_frozen(self):
        """Test that cards cannot be mutated in place."""
        card = DebitCard(id="1", name="Test", balance=10)
        with pytest.raises(ValidationError):
            card.balance = 20


class TestTransactionModels:
    """Tests for history and ledger entries."""

    def test_transaction_defaults(self):
        """Test a fund transaction with no category."""
        transaction = Transaction(
            id=1,
            operation="add",
            amount=500,
            date="01/15/2025",
            card_id="1",
            card_name="Main Debit Card",
        )
        assert transaction.kind == CARD_FUND
        assert transaction.operation is FundOperation.ADD
        assert transaction.category == ""

    def test_transaction_wire_keys(self):
        transaction = Transaction(
            id=7, operation="subtract", amount=12.5, date="01/15/2025",
            card_id="1", card_name="Main", category="Dining",
        )
        data = transaction.to_document_dict()
        assert data["type"] == "card_fund"
        assert data["operation"] == "subtract"
        assert data["cardId"] == "1"
        assert data["cardName"] == "Main"

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (0, -5):
            with pytest.raises(ValueError):
                Transaction(id=1, operation="add", amount=amount, date="01/15/2025")

    def test_transaction_rejects_unknown_operation(self):
        with pytest.raises(ValueError):
            Transaction(id=1, operation="transfer", amount=1, date="01/15/2025")

    def test_ledger_entry_keeps_extra_fields(self):
        """Test legacy entries round-trip unknown keys."""
        entry = LedgerEntry.model_validate(
            {"id": 3, "amount": 20, "date": "01/15/2025", "merchant": "Cafe"}
        )
        assert entry.to_document_dict()["merchant"] == "Cafe"


class TestDocumentModels:
    """Tests for the root Document and its seed value."""

    def test_default_document(self):
        """Test the seed state used on first run."""
        document = default_document()
        assert len(document.cards) == 1
        card = document.cards[0]
        assert isinstance(card, DebitCard)
        assert card.id == "1"
        assert card.name == "Main Debit Card"
        assert card.balance == 2500.0
        assert card.expiry_date == "09/26"
        assert document.expenses == ()
        assert document.income == ()
        assert document.transaction_history == ()

    def test_default_categories(self):
        categories = default_document().categories
        assert categories.add_fund_categories == ("Salary", "Transfer", "Allowance")
        assert categories.subtract_fund_categories == ("Dining", "Shopping", "Groceries")

    def test_default_summary(self):
        summary = default_document().summary
        assert summary.monthly_budget == 5000.0
        assert summary.total_income == 0.0

    def test_document_wire_keys(self):
        """Test the persisted Document uses the original key names."""
        data = default_document().to_document_dict()
        assert set(data) == {
            "cards", "expenses", "income", "transactionHistory",
            "categories", "summary",
        }
        assert data["categories"]["addFundCategories"] == ["Salary", "Transfer", "Allowance"]
        assert data["summary"]["monthlyBudget"] == 5000.0
        assert data["cards"][0]["type"] == "debit"

    def test_document_round_trip(self):
        """Test a serialized Document parses back to an equal value."""
        document = Document(
            cards=(
                DebitCard(id="1", name="Main", balance=10),
                CreditCard(id="2", name="Visa", credit_limit=500, current_spending=25),
            ),
            transaction_history=(
                Transaction(id=2, operation="subtract", amount=25, date="01/15/2025",
                            card_id="2", card_name="Visa", category="Dining"),
            ),
            summary=Summary.model_validate({"totalIncome": 1, "custom": "kept"}),
        )
        assert Document.model_validate(document.to_document_dict()) == document

    def test_find_card(self):
        document = default_document()
        assert document.find_card("1").name == "Main Debit Card"
        assert document.find_card("missing") is None

    def test_missing_sections_use_defaults(self):
        """Test a partial stored Document is filled in."""
        document = Document.model_validate({"cards": []})
        assert document.cards == ()
        assert document.categories == CategorySet()


class TestCategories:
    """Tests for the category lists."""

    def test_list_type_values(self):
        """Test list selectors match the Document keys."""
        assert CategoryListType.ADD_FUND.value == "addFundCategories"
        assert CategoryListType.SUBTRACT_FUND.value == "subtractFundCategories"

    def test_list_type_for_operation(self):
        assert CategoryListType.for_operation(FundOperation.ADD) is CategoryListType.ADD_FUND
        assert CategoryListType.for_operation("subtract") is CategoryListType.SUBTRACT_FUND

    def test_with_names_replaces_one_list(self):
        categories = CategorySet()
        updated = categories.with_names(CategoryListType.SUBTRACT_FUND, ("Rent",))
        assert updated.subtract_fund_categories == ("Rent",)
        assert updated.add_fund_categories == categories.add_fund_categories
        assert categories.subtract_fund_categories == ("Dining", "Shopping", "Groceries")


class TestCommandModels:
    """Tests for command names and audit ids."""

    def test_command_name(self):
        command = AddCategory(list_type=CategoryListType.ADD_FUND, name="Freelance")
        assert command.command_name == "AddCategory"
        assert command.entity_id() == "Freelance"

    def test_add_card_accepts_card_dict(self):
        """Test the card union is resolved from a wire dict."""
        command = AddCard.model_validate(
            {"card": {"id": "9", "name": "Visa", "type": "credit", "creditLimit": 100}}
        )
        assert isinstance(command.card, CreditCard)
        assert command.entity_id() == "9"

    def test_history_replacement_has_no_entity(self):
        assert DeleteTransactionHistory(transactions=()).entity_id() is None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.DOCUMENT_SEEDED,
            description="Seeded",
        )
        assert event.event_type == AuditEventType.DOCUMENT_SEEDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.document_loaded(card_count=2, transaction_count=5)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "document_loaded"
        assert log_dict["details"] == {"cards": 2, "transactions": 5}

    def test_audit_event_builder_command_rejected(self):
        """Test AuditEventBuilder.command_rejected."""
        event = AuditEventBuilder.command_rejected("DeleteCard", "1", "boom")
        assert event.event_type == AuditEventType.COMMAND_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.command == "DeleteCard"
        assert event.entity_id == "1"
        assert event.error_message == "boom"

    def test_audit_event_builder_save_failed(self):
        event = AuditEventBuilder.save_failed("@eWallet_app_data", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert "@eWallet_app_data" in event.description


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
