from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from product_registry.core.auth_deps import get_current_caller
from product_registry.db.session import get_db
from product_registry.schemas.audit import AuditLogOut, AuditLogResponse
from product_registry.services.audit_service import AuditService

router = APIRouter(prefix="/audit")


@router.get("", response_model=AuditLogResponse)
async def get_audit_log(
    productId: Optional[int] = Query(default=None, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    _caller: str = Depends(get_current_caller),
):
    rows = AuditService().list_events(db, product_ref=productId, limit=limit)
    return AuditLogResponse(
        events=[
            AuditLogOut(
                audit_id=r.id,
                timestamp_iso=r.created_at.isoformat(),
                actor=r.actor,
                action=r.action,
                status=r.status,
                product_ref=r.product_ref,
                clock=r.clock,
                request_id=r.request_id,
                payload_hash=r.payload_hash,
                details=r.details_json,
            )
            for r in rows
        ]
    )
