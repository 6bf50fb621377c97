# product_registry/models/product.py
from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import String, DateTime, BigInteger, Integer, Index, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from product_registry.core.types import Product
from product_registry.db.base import Base


class ProductRecord(Base):
    """
    One row per registered product.
    `id` is the registry-assigned sequential id (never generated by the database).
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    product_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    origin: Mapped[str] = mapped_column(String(100), nullable=False)
    document_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    manufacturer: Mapped[str] = mapped_column(String(128), nullable=False)
    product_type: Mapped[str] = mapped_column(String(50), nullable=False)
    batch_number: Mapped[str] = mapped_column(String(50), nullable=False)
    expiry_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False)
    status: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    quantity: Mapped[int] = mapped_column(BigInteger, nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("id >= 0", name="ck_products_id_nonnegative"),
        CheckConstraint("quantity > 0", name="ck_products_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
        Index("ix_products_manufacturer", "manufacturer"),
    )

    @classmethod
    def from_domain(cls, id: int, product: Product) -> "ProductRecord":
        return cls(
            id=id,
            product_id=product.product_id,
            name=product.name,
            origin=product.origin,
            document_hash=product.document_hash,
            timestamp=product.timestamp,
            manufacturer=product.manufacturer,
            product_type=product.product_type,
            batch_number=product.batch_number,
            expiry_date=product.expiry_date,
            location=product.location,
            currency=product.currency,
            status=product.status,
            quantity=product.quantity,
            price=product.price,
        )

    def to_domain(self) -> Product:
        return Product(
            product_id=self.product_id,
            name=self.name,
            origin=self.origin,
            document_hash=self.document_hash,
            timestamp=self.timestamp,
            manufacturer=self.manufacturer,
            product_type=self.product_type,
            batch_number=self.batch_number,
            expiry_date=self.expiry_date,
            location=self.location,
            currency=self.currency,
            status=bool(self.status),
            quantity=self.quantity,
            price=self.price,
        )
