"""
Main Orchestrator for eWallet

This module ties the components together and defines the caller-side
flows the screens use:
1. Card management (add / edit / delete)
2. Fund operations (card -> operation -> amount -> commit)
3. Category management
4. Read-side views (expenses, income, weekly report, card report)

DESIGN DECISION: The orchestrator is where user input is validated.
Commands only ever reach the store with well-formed values; a rejected
input raises WalletValidationError and the Document is left alone.
"""

from datetime import date, datetime
from typing import Any, Callable, Optional, Union
from uuid import uuid4

import structlog

from ewallet.audit import AuditLogger, configure_logging
from ewallet.config import AppSettings, Settings, check_settings, get_settings
from ewallet.models.commands import (
    AddCard,
    AddCategory,
    ApplyFundOperation,
    DeleteCard,
    DeleteCategory,
    DeleteTransaction,
    DeleteTransactionHistory,
    LoadData,
    UpdateCard,
    UpdateCategory,
)
from ewallet.models.reports import CardReport, FlowOverview, WeeklySeries
from ewallet.models.wallet import (
    CategoryListType,
    CreditCard,
    DebitCard,
    Document,
    FundOperation,
    Transaction,
)
from ewallet.queries import (
    build_card_report,
    build_fund_transaction,
    card_transactions,
    flow_overview,
    render_report_text,
    weekly_series,
)
from ewallet.services.share import ShareError, ShareSinkInterface
from ewallet.services.storage import (
    DocumentGateway,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
)
from ewallet.store import WalletStore
from ewallet.validation import (
    WalletValidationError,
    WalletValidator,
    parse_amount,
)


AnyCard = Union[DebitCard, CreditCard]


class WalletService:
    """
    Caller-side facade over the store.

    Fund operation flow:
    1. Card selected   -> card_id must exist
    2. Operation chosen -> add or subtract
    3. Amount entered  -> must parse to a finite number > 0
    4. Commit          -> one ApplyFundOperation command

    Cancelling at any step means simply not calling fund_operation().
    """

    def __init__(
        self,
        store: WalletStore,
        settings: Optional[AppSettings] = None,
        validator: Optional[WalletValidator] = None,
        share_sink: Optional[ShareSinkInterface] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._settings = settings or get_settings().app
        self._validator = validator or WalletValidator()
        self._share_sink = share_sink
        self._clock = clock
        self._logger = structlog.get_logger("ewallet.service")

    @property
    def store(self) -> WalletStore:
        return self._store

    @property
    def document(self) -> Document:
        return self._store.document

    def _today(self) -> date:
        return self._clock().date()

    def _next_transaction_id(self) -> int:
        """Millisecond timestamp, bumped past the newest stored id if needed."""
        now_ms = int(self._clock().timestamp() * 1000)
        latest = max((t.id for t in self.document.transaction_history), default=0)
        return max(now_ms, latest + 1)

    # =========================================================================
    # Cards
    # =========================================================================

    def add_card(
        self,
        name: str,
        kind: str = "debit",
        balance: Any = None,
        credit_limit: Any = None,
        payment_date: Optional[str] = None,
    ) -> AnyCard:
        """
        Add a new card with a generated id.

        Credit cards without a limit get the configured default limit,
        and start with zero spending.
        """
        card_name = self._validator.card_name(name)
        card_id = str(uuid4())

        if kind == "debit":
            card = DebitCard(
                id=card_id,
                name=card_name,
                expiry_date=self._settings.default_expiry_date,
                balance=self._validator.opening_amount(balance, "balance"),
            )
        elif kind == "credit":
            limit = self._validator.opening_amount(credit_limit, "credit limit")
            card = CreditCard(
                id=card_id,
                name=card_name,
                expiry_date=self._settings.default_expiry_date,
                credit_limit=limit or self._settings.default_credit_limit,
                current_spending=0.0,
                payment_date=(payment_date or "").strip()
                or self._settings.default_payment_date,
            )
        else:
            raise WalletValidationError(f"Unknown card type: {kind}", field="kind")

        self._store.dispatch(AddCard(card=card))
        self._logger.info("card_added", card_id=card.id, kind=card.kind)
        return card

    def edit_card(
        self,
        card_id: str,
        name: str,
        kind: Optional[str] = None,
        balance: Any = None,
        credit_limit: Any = None,
        payment_date: Optional[str] = None,
    ) -> AnyCard:
        """
        Edit a card's name, type and type-specific fields.

        Fields left as None keep their current value. Switching a card
        between debit and credit drops the other type's fields.
        """
        card = self._validator.existing_card(self.document, card_id)
        card_name = self._validator.card_name(name)
        kind = kind or card.kind
        if kind not in ("debit", "credit"):
            raise WalletValidationError(f"Unknown card type: {kind}", field="kind")

        changes: dict[str, Any] = {"name": card_name, "kind": kind}
        if kind == "debit":
            changes["balance"] = (
                self._validator.opening_amount(balance, "balance")
                if balance is not None
                else getattr(card, "balance", 0.0)
            )
        else:
            changes["credit_limit"] = (
                self._validator.opening_amount(credit_limit, "credit limit")
                if credit_limit is not None
                else getattr(card, "credit_limit", self._settings.default_credit_limit)
            )
            changes["payment_date"] = (
                payment_date.strip()
                if payment_date is not None
                else getattr(card, "payment_date", self._settings.default_payment_date)
            )

        document = self._store.dispatch(UpdateCard(card_id=card_id, changes=changes))
        return document.find_card(card_id)

    def delete_card(self, card_id: str) -> None:
        """Remove a card. Its history rows stay in the Document."""
        self._validator.existing_card(self.document, card_id)
        self._store.dispatch(DeleteCard(card_id=card_id))

    # =========================================================================
    # Fund operations and history
    # =========================================================================

    def fund_operation(
        self,
        card_id: str,
        operation: Union[FundOperation, str],
        raw_amount: Any,
        description: str = "",
        category: str = "",
    ) -> Transaction:
        """
        Add or subtract funds on a card and record the transaction.

        Raises:
            CardNotFoundError: unknown card
            InvalidAmountError: amount not a finite number > 0
            WalletValidationError: operation is not add/subtract
        """
        card = self._validator.existing_card(self.document, card_id)
        amount = parse_amount(raw_amount)
        try:
            op = FundOperation(operation)
        except ValueError:
            raise WalletValidationError(
                f"Unknown operation: {operation}", field="operation"
            )

        transaction = build_fund_transaction(
            card,
            op,
            amount,
            transaction_id=self._next_transaction_id(),
            on=self._today(),
            description=description,
            category=category,
            date_format=self._settings.date_format,
            currency_symbol=self._settings.currency_symbol,
        )
        self._store.dispatch(ApplyFundOperation(transaction=transaction))
        self._logger.info(
            "fund_operation_applied",
            card_id=card.id,
            operation=op.value,
            amount=amount,
        )
        return transaction

    def card_history(self, card_id: str) -> list[Transaction]:
        return card_transactions(self.document, card_id)

    def purge_card_history(self, card_id: str) -> int:
        """Delete every history row of a card. Returns how many were removed."""
        history = self.document.transaction_history
        remaining = tuple(t for t in history if t.card_id != card_id)
        self._store.dispatch(DeleteTransactionHistory(transactions=remaining))
        return len(history) - len(remaining)

    def delete_transaction(self, transaction_id: int) -> None:
        self._store.dispatch(DeleteTransaction(transaction_id=transaction_id))

    # =========================================================================
    # Categories
    # =========================================================================

    def categories_for(self, operation: Union[FundOperation, str]) -> tuple[str, ...]:
        """Category names offered for an add or subtract operation."""
        list_type = CategoryListType.for_operation(FundOperation(operation))
        return self.document.categories.names(list_type)

    def add_category(self, list_type: Union[CategoryListType, str], name: str) -> str:
        list_type = CategoryListType(list_type)
        existing = self.document.categories.names(list_type)
        category = self._validator.new_category(name, existing)
        self._store.dispatch(AddCategory(list_type=list_type, name=category))
        return category

    def rename_category(
        self,
        list_type: Union[CategoryListType, str],
        old_name: str,
        new_name: str,
    ) -> str:
        """Rename a category. Transactions keep the label they were saved with."""
        list_type = CategoryListType(list_type)
        existing = self.document.categories.names(list_type)
        category = self._validator.renamed_category(old_name, new_name, existing)
        self._store.dispatch(
            UpdateCategory(list_type=list_type, old_name=old_name, new_name=category)
        )
        return category

    def delete_category(self, list_type: Union[CategoryListType, str], name: str) -> None:
        self._store.dispatch(
            DeleteCategory(list_type=CategoryListType(list_type), name=name)
        )

    # =========================================================================
    # Views
    # =========================================================================

    def expenses_overview(self) -> FlowOverview:
        return flow_overview(self.document, FundOperation.SUBTRACT)

    def income_overview(self) -> FlowOverview:
        return flow_overview(self.document, FundOperation.ADD)

    def weekly_report(self, today: Optional[date] = None) -> WeeklySeries:
        return weekly_series(
            self.document,
            today=today or self._today(),
            date_format=self._settings.date_format,
            weekday_format=self._settings.weekday_format,
        )

    def card_report(self, card_id: str) -> CardReport:
        card = self._validator.existing_card(self.document, card_id)
        return build_card_report(
            card,
            card_transactions(self.document, card_id),
            generated_on=self._today(),
            date_format=self._settings.date_format,
        )

    def card_report_text(self, card_id: str) -> str:
        return render_report_text(
            self.card_report(card_id),
            currency_symbol=self._settings.currency_symbol,
        )

    async def export_card_report(
        self,
        card_id: str,
        sink: Optional[ShareSinkInterface] = None,
    ) -> bool:
        """
        Hand a card's report text to the share sink.

        Raises:
            CardNotFoundError: unknown card
            ShareError: the sink failed (also audited)
        """
        sink = sink or self._share_sink
        if sink is None:
            raise ShareError("No share sink configured")

        card = self._validator.existing_card(self.document, card_id)
        title = f"Card History - {card.name}"
        text = self.card_report_text(card_id)

        audit = self._store.audit_logger
        try:
            shared = await sink.share(title, text)
        except ShareError as e:
            self._logger.warning("report_export_failed", card_id=card_id, error=str(e))
            audit.log_export_failed(card_id, str(e))
            raise

        if shared:
            audit.log_report_exported(card_id, title)
        return shared

    # =========================================================================
    # Backup
    # =========================================================================

    def export_document(self) -> dict[str, Any]:
        """The Document exactly as it is persisted."""
        return self.document.to_document_dict()

    def import_document(self, data: dict[str, Any]) -> Document:
        """
        Replace all state with a previously exported Document.

        Raises:
            pydantic.ValidationError: if `data` is not a valid Document
        """
        return self._store.dispatch(LoadData(document=Document.model_validate(data)))


def create_storage(settings: Settings) -> KeyValueStorageInterface:
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(storage_settings.path)


async def create_wallet(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    share_sink: Optional[ShareSinkInterface] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> WalletService:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to get_settings()
        storage: Overrides the configured storage backend

    Returns:
        A WalletService whose store has already been bootstrapped

    Raises:
        ConfigurationError: a settings section is invalid
    """
    settings = settings or get_settings()
    check_settings(settings)
    log_settings = settings.logging
    configure_logging(log_settings.level, log_settings.json_output)

    app_settings = settings.app
    gateway = DocumentGateway(
        storage or create_storage(settings),
        key=settings.storage.document_key,
    )
    store = WalletStore(
        gateway=gateway,
        audit_logger=AuditLogger(history_size=app_settings.audit_history_size),
    )
    await store.bootstrap()

    return WalletService(
        store,
        settings=app_settings,
        share_sink=share_sink,
        clock=clock,
    )
