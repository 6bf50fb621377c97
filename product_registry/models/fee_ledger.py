# product_registry/models/fee_ledger.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import (
    JSON,
    String,
    DateTime,
    BigInteger,
    Integer,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from product_registry.db.base import Base


class FeeLedgerEntry(Base):
    """
    Append-only hash-chained registration fee transfers.

    entry_hash = SHA256(prev_hash + canonical(payload_json))
    """

    __tablename__ = "fee_ledger_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    seq: Mapped[int] = mapped_column(Integer, nullable=False)  # monotonic, starts at 1

    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    sender: Mapped[str] = mapped_column(String(128), nullable=False)
    recipient: Mapped[str] = mapped_column(String(128), nullable=False)
    memo: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    prev_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    entry_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    payload_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("seq", name="uq_fee_ledger_seq"),
        Index("ix_fee_ledger_sender", "sender"),
        Index("ix_fee_ledger_recipient", "recipient"),
    )
