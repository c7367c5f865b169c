"""
Wallet State Store

Holds the one live Document and applies Commands to it.

Flow per command:
1. apply_command() builds the new Document (pure, see reducer.py)
2. the new Document replaces the old one
3. a save of the current Document is scheduled (fire-and-forget)
4. subscribers are notified

If step 1 raises, nothing else happens: the Document is unchanged and
no save is scheduled.

Commands run one at a time in the caller's thread, in issuance order.
Saves are asynchronous and may finish out of order, but every save
writes the Document that is current when it runs, so the last save to
finish reflects the latest state.
"""

import asyncio
from typing import Callable, Optional

import structlog

from ewallet.audit import AuditLogger
from ewallet.models.commands import Command, LoadData
from ewallet.models.wallet import Document, default_document
from ewallet.services.storage import DocumentGateway
from ewallet.store.reducer import CommandError, apply_command


Listener = Callable[[Document], None]


class WalletStore:
    """
    Single-threaded command dispatcher with an injected persistence port.

    Without a gateway the store is purely in-memory.
    """

    def __init__(
        self,
        gateway: Optional[DocumentGateway] = None,
        audit_logger: Optional[AuditLogger] = None,
        document: Optional[Document] = None,
    ):
        self._gateway = gateway
        self._audit_logger = audit_logger or AuditLogger()
        self._document = document if document is not None else default_document()
        self._commands_applied = 0
        self._pending: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []
        self._logger = structlog.get_logger("ewallet.store")

    @property
    def document(self) -> Document:
        return self._document

    @property
    def commands_applied(self) -> int:
        """Number of successful commands other than LoadData."""
        return self._commands_applied

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with every new Document. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, command: Command) -> Document:
        """
        Apply a command and schedule persistence.

        Returns:
            The new Document

        Raises:
            CommandError: If the command could not be applied
        """
        try:
            new_document = apply_command(self._document, command)
        except CommandError as e:
            self._audit_logger.log_command_rejected(
                command.command_name, command.entity_id(), str(e)
            )
            raise

        self._document = new_document
        if not isinstance(command, LoadData):
            self._commands_applied += 1
        self._audit_logger.log_command_applied(command.command_name, command.entity_id())

        self._schedule_save()
        self._notify(new_document)
        return new_document

    def _notify(self, document: Document) -> None:
        """Call every listener; a failing listener is logged and skipped."""
        for listener in list(self._listeners):
            try:
                listener(document)
            except Exception:
                self._logger.exception("listener_failed", listener=repr(listener))

    def _schedule_save(self) -> None:
        if self._gateway is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            asyncio.run(self._persist())
            return

        task = loop.create_task(self._persist())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self) -> bool:
        key = self._gateway.key
        try:
            saved = await self._gateway.save(self._document)
        except Exception as e:
            self._logger.exception("document_save_crashed", key=key)
            self._audit_logger.log_save_failed(key, str(e))
            return False

        if saved:
            self._audit_logger.log_document_saved(key)
        else:
            self._audit_logger.log_save_failed(key)
        return saved

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def bootstrap(self) -> Document:
        """
        Load the stored Document once at start-up.

        - nothing usable stored: keep the current (seed) Document
        - a command already changed state: ignore the stored Document
        - otherwise: replace the Document via LoadData
        """
        if self._gateway is None:
            return self._document

        loaded = await self._gateway.load()

        if self._commands_applied:
            self._audit_logger.log_late_load_ignored(self._commands_applied)
            return self._document

        if loaded is None:
            self._audit_logger.log_document_seeded()
            return self._document

        self._audit_logger.log_document_loaded(
            len(loaded.cards), len(loaded.transaction_history)
        )
        return self.dispatch(LoadData(document=loaded))
