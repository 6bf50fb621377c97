from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from product_registry.core.hashing import payload_hash
from product_registry.models.audit_log import AuditLog


class AuditAction:
    # Registrations
    PRODUCT_REGISTERED = "PRODUCT_REGISTERED"
    PRODUCT_REGISTRATION_REJECTED = "PRODUCT_REGISTRATION_REJECTED"

    # Amendments
    PRODUCT_UPDATED = "PRODUCT_UPDATED"
    PRODUCT_UPDATE_REJECTED = "PRODUCT_UPDATE_REJECTED"

    # Configuration
    AUTHORITY_CONTRACT_SET = "AUTHORITY_CONTRACT_SET"
    REGISTRATION_FEE_SET = "REGISTRATION_FEE_SET"
    CONFIG_CHANGE_REJECTED = "CONFIG_CHANGE_REJECTED"


class AuditService:
    def write(
        self,
        db: Session,
        *,
        actor: str,
        action: str,
        request_id: Optional[str],
        details: Dict[str, Any],
        product_ref: Optional[int] = None,
        clock: Optional[int] = None,
        status: str = "ok",
    ) -> AuditLog:
        """
        Append one audit row. Flushed only; the caller commits.
        """
        row = AuditLog(
            actor=actor,
            action=action,
            status=status,
            request_id=request_id,
            product_ref=product_ref,
            clock=clock,
            payload_hash=payload_hash(details),
            details_json=details,
        )
        db.add(row)
        db.flush()
        return row

    def list_events(
        self,
        db: Session,
        *,
        product_ref: Optional[int] = None,
        limit: int = 100,
    ) -> List[AuditLog]:
        q = select(AuditLog)
        if product_ref is not None:
            q = q.where(AuditLog.product_ref == product_ref)
        return db.execute(q.order_by(AuditLog.id.asc()).limit(limit)).scalars().all()
