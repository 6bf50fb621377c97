# product_registry/services/fee_transfer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session

from product_registry.core.errors import FeeTransferError
from product_registry.services.ledger_service import FeeLedgerService

logger = logging.getLogger(__name__)


class FeeTransfer(Protocol):
    """
    Moves `amount` from `sender` to `recipient`.
    Returns normally on success; raises FeeTransferError otherwise.
    """

    def transfer(
        self,
        amount: int,
        sender: str,
        recipient: str,
        *,
        memo: Optional[str] = None,
    ) -> None: ...


@dataclass(frozen=True)
class FeeTransferRecord:
    amount: int
    sender: str
    recipient: str
    memo: Optional[str] = None


class RecordingFeeTransfer:
    """In-process transfer log. Used by in-memory registries and tests."""

    def __init__(self) -> None:
        self.transfers: List[FeeTransferRecord] = []

    def transfer(
        self,
        amount: int,
        sender: str,
        recipient: str,
        *,
        memo: Optional[str] = None,
    ) -> None:
        if not recipient:
            raise FeeTransferError("Fee transfer needs a recipient.")
        self.transfers.append(FeeTransferRecord(amount=amount, sender=sender, recipient=recipient, memo=memo))


class LedgerFeeTransfer:
    """
    Writes the transfer to the hash-chained fee ledger inside the caller's session.
    Nothing is committed here; a rollback of the surrounding transaction drops the entry.
    """

    def __init__(self, db: Session, ledger: Optional[FeeLedgerService] = None):
        self.db = db
        self.ledger = ledger or FeeLedgerService()

    def transfer(
        self,
        amount: int,
        sender: str,
        recipient: str,
        *,
        memo: Optional[str] = None,
    ) -> None:
        if not recipient:
            raise FeeTransferError("Fee transfer needs a recipient.")

        entry = self.ledger.append_entry(
            self.db,
            amount=amount,
            sender=sender,
            recipient=recipient,
            memo=memo,
        )
        logger.info(
            "[ledger] fee transfer seq=%s amount=%s %s -> %s",
            entry.seq,
            amount,
            sender,
            recipient,
        )
