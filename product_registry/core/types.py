from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    # EXACTLY 3 settlement currencies
    STX = "STX"
    USD = "USD"
    BTC = "BTC"


@dataclass(frozen=True)
class CallContext:
    """
    Per-operation execution context.
    `caller` is an opaque principal; `clock` is the logical time (e.g. block height).
    """
    caller: str
    clock: int


@dataclass(frozen=True)
class ProductRegistration:
    """Caller-supplied fields of a registration request (unvalidated)."""
    product_id: str
    name: str
    origin: str
    document_hash: str
    product_type: str
    batch_number: str
    expiry_date: int
    location: str
    currency: str
    quantity: int
    price: int


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    origin: str
    document_hash: str
    timestamp: int
    manufacturer: str
    product_type: str
    batch_number: str
    expiry_date: int
    location: str
    currency: str
    status: bool
    quantity: int
    price: int


@dataclass(frozen=True)
class ProductUpdate:
    """Latest amendment of a product. Replaced wholesale on every update."""
    update_name: str
    update_origin: str
    update_timestamp: int
    updater: str


@dataclass
class RegistryState:
    """
    Registry-wide singleton values.
    One instance per registry; never shared through module globals.
    """
    next_product_id: int = 0
    max_products: int = 10000
    registration_fee: int = 500
    authority_contract: Optional[str] = None
