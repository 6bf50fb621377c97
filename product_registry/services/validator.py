# product_registry/services/validator.py
"""
Field rules for product registration and amendment.

Every predicate is pure. FIELD_RULES fixes the order in which registration
fields are checked; the first failing rule decides the reported ErrorKind.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

from product_registry.core.errors import ErrorKind
from product_registry.core.types import Currency, ProductRegistration

PRODUCT_ID_MAX = 64
NAME_MAX = 100
ORIGIN_MAX = 100
DOCUMENT_HASH_LENGTH = 64
PRODUCT_TYPE_MAX = 50
BATCH_NUMBER_MAX = 50
LOCATION_MAX = 100

ALLOWED_CURRENCIES = frozenset(c.value for c in Currency)


# ─────────────────────────────────────────────
# PREDICATES
# ─────────────────────────────────────────────

def is_bounded_text(value: str, max_length: int) -> bool:
    """Non-empty ASCII string of at most max_length characters."""
    if not isinstance(value, str) or not value:
        return False
    return len(value) <= max_length and value.isascii()


def is_valid_product_id(value: str) -> bool:
    return is_bounded_text(value, PRODUCT_ID_MAX)


def is_valid_name(value: str) -> bool:
    return is_bounded_text(value, NAME_MAX)


def is_valid_origin(value: str) -> bool:
    return is_bounded_text(value, ORIGIN_MAX)


def is_valid_document_hash(value: str) -> bool:
    return isinstance(value, str) and len(value) == DOCUMENT_HASH_LENGTH and value.isascii()


def is_valid_product_type(value: str) -> bool:
    return is_bounded_text(value, PRODUCT_TYPE_MAX)


def is_valid_batch_number(value: str) -> bool:
    return is_bounded_text(value, BATCH_NUMBER_MAX)


def is_valid_expiry(expiry_date: int, clock: int) -> bool:
    return expiry_date > clock


def is_valid_location(value: str) -> bool:
    return is_bounded_text(value, LOCATION_MAX)


def is_valid_currency(value: str) -> bool:
    return value in ALLOWED_CURRENCIES


def is_valid_quantity(value: int) -> bool:
    return value > 0


def is_valid_price(value: int) -> bool:
    return value >= 0


# ─────────────────────────────────────────────
# ORDERED RULE LIST
# ─────────────────────────────────────────────

FieldCheck = Callable[[ProductRegistration, int], bool]

FIELD_RULES: Tuple[Tuple[ErrorKind, FieldCheck], ...] = (
    (ErrorKind.INVALID_PRODUCT_ID, lambda r, clock: is_valid_product_id(r.product_id)),
    (ErrorKind.INVALID_NAME, lambda r, clock: is_valid_name(r.name)),
    (ErrorKind.INVALID_ORIGIN, lambda r, clock: is_valid_origin(r.origin)),
    (ErrorKind.INVALID_DOCUMENT_HASH, lambda r, clock: is_valid_document_hash(r.document_hash)),
    (ErrorKind.INVALID_PRODUCT_TYPE, lambda r, clock: is_valid_product_type(r.product_type)),
    (ErrorKind.INVALID_BATCH_NUMBER, lambda r, clock: is_valid_batch_number(r.batch_number)),
    (ErrorKind.INVALID_EXPIRY_DATE, lambda r, clock: is_valid_expiry(r.expiry_date, clock)),
    (ErrorKind.INVALID_LOCATION, lambda r, clock: is_valid_location(r.location)),
    (ErrorKind.INVALID_CURRENCY, lambda r, clock: is_valid_currency(r.currency)),
    (ErrorKind.INVALID_QUANTITY, lambda r, clock: is_valid_quantity(r.quantity)),
    (ErrorKind.INVALID_PRICE, lambda r, clock: is_valid_price(r.price)),
)


def first_field_violation(registration: ProductRegistration, clock: int) -> Optional[ErrorKind]:
    """
    Walks FIELD_RULES in order.
    Returns the ErrorKind of the first failing rule, or None when all pass.
    """
    for kind, check in FIELD_RULES:
        if not check(registration, clock):
            return kind
    return None


def is_valid_amendment(name: str, origin: str) -> bool:
    """Name/origin pair accepted by an update."""
    return is_valid_name(name) and is_valid_origin(origin)
