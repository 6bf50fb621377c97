from __future__ import annotations

from enum import IntEnum


class ErrorKind(IntEnum):
    """
    Registration failure codes. One code per registration rule.
    Numbering is kept stable so clients can match on the integer value.
    """

    NOT_AUTHORIZED = 100
    INVALID_PRODUCT_ID = 101
    INVALID_NAME = 102
    INVALID_ORIGIN = 103
    INVALID_DOCUMENT_HASH = 104
    PRODUCT_ALREADY_EXISTS = 106
    AUTHORITY_NOT_VERIFIED = 109
    INVALID_BATCH_NUMBER = 110
    INVALID_EXPIRY_DATE = 111
    MAX_PRODUCTS_EXCEEDED = 114
    INVALID_PRODUCT_TYPE = 115
    INVALID_QUANTITY = 116
    INVALID_PRICE = 117
    INVALID_LOCATION = 118
    INVALID_CURRENCY = 119


class RegistrationError(ValueError):
    """Raised when a registration is rejected. `kind` names the first failing rule."""

    def __init__(self, kind: ErrorKind):
        self.kind = kind
        super().__init__(f"Registration rejected: {kind.name} ({int(kind)})")


class FeeTransferError(RuntimeError):
    """Raised by a fee transfer collaborator when the value transfer did not happen."""
