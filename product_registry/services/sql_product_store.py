# product_registry/services/sql_product_store.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from product_registry.core.types import Product, ProductUpdate
from product_registry.models.product import ProductRecord
from product_registry.models.product_update import ProductUpdateRecord


class SqlProductStore:
    """
    ProductStore over the `products` / `product_updates` tables.

    The unique constraint on products.product_id is the external-id index.
    Writes are flushed only; commit / rollback belong to the surrounding transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def contains(self, product_id: str) -> bool:
        return (
            self.db.execute(
                select(ProductRecord.id).where(ProductRecord.product_id == product_id)
            ).first()
            is not None
        )

    def insert(self, id: int, product: Product) -> None:
        if self.db.get(ProductRecord, id) is not None:
            raise ValueError(f"Product id {id} already stored.")
        if self.contains(product.product_id):
            raise ValueError(f"Product id {product.product_id!r} already registered.")

        self.db.add(ProductRecord.from_domain(id, product))
        self.db.flush()

    def get(self, id: int) -> Optional[Product]:
        row = self.db.get(ProductRecord, id)
        return row.to_domain() if row else None

    def get_update(self, id: int) -> Optional[ProductUpdate]:
        row = self.db.get(ProductUpdateRecord, id)
        return row.to_domain() if row else None

    def apply_update(
        self,
        id: int,
        *,
        name: str,
        origin: str,
        timestamp: int,
        updater: str,
    ) -> None:
        row = self.db.get(ProductRecord, id)
        if row is None:
            raise KeyError(id)

        row.name = name
        row.origin = origin
        row.timestamp = timestamp

        upd = self.db.get(ProductUpdateRecord, id)
        if upd is None:
            upd = ProductUpdateRecord(product_ref=id)
            self.db.add(upd)

        # replaced wholesale, never merged
        upd.update_name = name
        upd.update_origin = origin
        upd.update_timestamp = timestamp
        upd.updater = updater

        self.db.flush()

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(ProductRecord)).scalar_one()
