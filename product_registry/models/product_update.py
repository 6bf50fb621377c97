# product_registry/models/product_update.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, BigInteger, Integer, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from product_registry.core.types import ProductUpdate
from product_registry.db.base import Base


class ProductUpdateRecord(Base):
    """
    Latest amendment per product (primary key = product id).
    Overwritten on each update, so at most one row per product.
    """

    __tablename__ = "product_updates"

    product_ref: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )

    update_name: Mapped[str] = mapped_column(String(100), nullable=False)
    update_origin: Mapped[str] = mapped_column(String(100), nullable=False)
    update_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updater: Mapped[str] = mapped_column(String(128), nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def to_domain(self) -> ProductUpdate:
        return ProductUpdate(
            update_name=self.update_name,
            update_origin=self.update_origin,
            update_timestamp=self.update_timestamp,
            updater=self.updater,
        )
