from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, String, DateTime, BigInteger, Integer, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from product_registry.db.base import Base


class AuditLog(Base):
    """
    Registry audit trail.
    - Append-only (never UPDATE)
    - Actor, action, product reference, request-id, payload hash + summary.
    """
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Correlation
    request_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)

    # Who / what
    actor: Mapped[str] = mapped_column(String(128), nullable=False)
    action: Mapped[str] = mapped_column(String(96), nullable=False)  # e.g., PRODUCT_REGISTERED
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="ok")

    # Registry id of the product concerned, when there is one
    product_ref: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    clock: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    payload_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    details_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_audit_logs_product", "product_ref"),
        Index("ix_audit_logs_action", "action"),
        Index("ix_audit_logs_created", "created_at"),
    )
