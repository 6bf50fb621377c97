from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class AuditLogOut(BaseModel):
    """
    Audit log record (append-only).
    """
    audit_id: int
    timestamp_iso: str
    actor: str
    action: str
    status: str
    product_ref: Optional[int] = None
    clock: Optional[int] = None
    request_id: Optional[str] = None
    payload_hash: str
    details: dict = Field(default_factory=dict)


class AuditLogResponse(BaseModel):
    events: List[AuditLogOut] = Field(default_factory=list)
