# product_registry/services/ledger_service.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from product_registry.core.hashing import GENESIS_HASH, hash_chain
from product_registry.models.fee_ledger import FeeLedgerEntry


def _now():
    return datetime.now(timezone.utc)


class FeeLedgerService:
    """
    Append-only fee ledger.
    Every registration fee transfer lands here as one hash-chained entry.

    Entries are flushed, never committed: the caller's transaction decides
    whether the transfer (and the registration it pays for) becomes visible.
    """

    GENESIS_HASH = GENESIS_HASH

    # ─────────────────────────────────────────────
    # INTERNAL HELPERS
    # ─────────────────────────────────────────────

    def _get_last_entry(self, db: Session) -> Optional[FeeLedgerEntry]:
        return db.execute(
            select(FeeLedgerEntry).order_by(FeeLedgerEntry.seq.desc()).limit(1)
        ).scalar_one_or_none()

    # ─────────────────────────────────────────────
    # PUBLIC API
    # ─────────────────────────────────────────────

    def append_entry(
        self,
        db: Session,
        *,
        amount: int,
        sender: str,
        recipient: str,
        memo: Optional[str] = None,
    ) -> FeeLedgerEntry:
        last = self._get_last_entry(db)

        prev_hash = last.entry_hash if last else self.GENESIS_HASH
        seq = 1 if not last else last.seq + 1

        entry_payload: Dict[str, Any] = {
            "seq": seq,
            "amount": amount,
            "sender": sender,
            "recipient": recipient,
            "memo": memo,
            "created_at": _now().isoformat(),
        }

        row = FeeLedgerEntry(
            seq=seq,
            amount=amount,
            sender=sender,
            recipient=recipient,
            memo=memo,
            prev_hash=prev_hash,
            entry_hash=hash_chain(prev_hash, entry_payload),
            payload_json=entry_payload,
        )

        db.add(row)
        db.flush()
        return row

    # ─────────────────────────────────────────────
    # READ-ONLY HELPERS (AUDIT)
    # ─────────────────────────────────────────────

    def list_entries(self, db: Session) -> list[FeeLedgerEntry]:
        return (
            db.execute(select(FeeLedgerEntry).order_by(FeeLedgerEntry.seq.asc()))
            .scalars()
            .all()
        )

    def verify_chain(self, db: Session) -> bool:
        """
        Recomputes every hash from genesis.
        False as soon as one entry does not match its predecessor.
        """
        prev_hash = self.GENESIS_HASH

        for e in self.list_entries(db):
            if e.prev_hash != prev_hash:
                return False
            if e.entry_hash != hash_chain(prev_hash, e.payload_json):
                return False
            prev_hash = e.entry_hash

        return True
