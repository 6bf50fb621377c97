# product_registry/services/product_store.py
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Protocol

from product_registry.core.types import Product, ProductUpdate


class ProductStore(Protocol):
    """
    Storage contract for registered products.

    Three indices are kept in step:
    - id -> Product
    - external product id -> id (uniqueness)
    - id -> latest ProductUpdate
    """

    def contains(self, product_id: str) -> bool: ...

    def insert(self, id: int, product: Product) -> None: ...

    def get(self, id: int) -> Optional[Product]: ...

    def get_update(self, id: int) -> Optional[ProductUpdate]: ...

    def apply_update(
        self,
        id: int,
        *,
        name: str,
        origin: str,
        timestamp: int,
        updater: str,
    ) -> None: ...

    def count(self) -> int: ...


class InMemoryProductStore:
    def __init__(self) -> None:
        self._products: Dict[int, Product] = {}
        self._ids_by_product_id: Dict[str, int] = {}
        self._updates: Dict[int, ProductUpdate] = {}

    def contains(self, product_id: str) -> bool:
        return product_id in self._ids_by_product_id

    def insert(self, id: int, product: Product) -> None:
        # both checks happen before either index is touched
        if id in self._products:
            raise ValueError(f"Product id {id} already stored.")
        if product.product_id in self._ids_by_product_id:
            raise ValueError(f"Product id {product.product_id!r} already registered.")

        self._products[id] = product
        self._ids_by_product_id[product.product_id] = id

    def get(self, id: int) -> Optional[Product]:
        return self._products.get(id)

    def get_update(self, id: int) -> Optional[ProductUpdate]:
        return self._updates.get(id)

    def apply_update(
        self,
        id: int,
        *,
        name: str,
        origin: str,
        timestamp: int,
        updater: str,
    ) -> None:
        current = self._products.get(id)
        if current is None:
            raise KeyError(id)

        self._products[id] = replace(current, name=name, origin=origin, timestamp=timestamp)
        self._updates[id] = ProductUpdate(
            update_name=name,
            update_origin=origin,
            update_timestamp=timestamp,
            updater=updater,
        )

    def count(self) -> int:
        return len(self._products)
