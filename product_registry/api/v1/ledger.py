# product_registry/api/v1/ledger.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from product_registry.core.auth_deps import get_current_caller
from product_registry.db.session import get_db
from product_registry.schemas.ledger import FeeLedgerEntryOut, FeeLedgerResponse, FeeLedgerVerifyResponse
from product_registry.services.ledger_service import FeeLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ledger")


@router.get("/fees", response_model=FeeLedgerResponse)
async def list_fee_ledger(
    db: Session = Depends(get_db),
    caller: str = Depends(get_current_caller),
):
    """
    Read-only fee ledger view.
    """
    entries = FeeLedgerService().list_entries(db)
    logger.info("[ledger] %s read %d fee entries", caller, len(entries))

    return FeeLedgerResponse(
        entries=[
            FeeLedgerEntryOut(
                seq=e.seq,
                amount=e.amount,
                sender=e.sender,
                recipient=e.recipient,
                memo=e.memo,
                prev_hash=e.prev_hash,
                entry_hash=e.entry_hash,
                created_at=e.created_at.isoformat(),
                payload=e.payload_json,
            )
            for e in entries
        ]
    )


@router.get("/fees/verify", response_model=FeeLedgerVerifyResponse)
async def verify_fee_ledger(
    db: Session = Depends(get_db),
    caller: str = Depends(get_current_caller),
):
    """
    Verifies hash-chain integrity.
    """
    svc = FeeLedgerService()
    ok = svc.verify_chain(db)
    count = len(svc.list_entries(db))
    logger.info("[ledger/verify] requested by %s valid=%s entries=%d", caller, ok, count)
    return FeeLedgerVerifyResponse(entries=count, valid=ok)
