from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from product_registry.core.types import Product, ProductRegistration, ProductUpdate
from product_registry.schemas.primitives import StoredInt


class ProductRegisterRequest(BaseModel):
    """
    Registration payload.
    Only types and the stored integer range are enforced here; the registry's
    ordered rules decide validity so the error code matches the first failing rule.
    """
    productId: str
    name: str
    origin: str
    documentHash: str
    productType: str
    batchNumber: str
    expiryDate: StoredInt
    location: str
    currency: str
    quantity: StoredInt
    price: StoredInt

    def to_registration(self) -> ProductRegistration:
        return ProductRegistration(
            product_id=self.productId,
            name=self.name,
            origin=self.origin,
            document_hash=self.documentHash,
            product_type=self.productType,
            batch_number=self.batchNumber,
            expiry_date=self.expiryDate,
            location=self.location,
            currency=self.currency,
            quantity=self.quantity,
            price=self.price,
        )


class ProductRegisterResponse(BaseModel):
    id: int = Field(..., ge=0)


class ProductUpdateRequest(BaseModel):
    name: str
    origin: str


class ProductOut(BaseModel):
    id: int
    productId: str
    name: str
    origin: str
    documentHash: str
    timestamp: int
    manufacturer: str
    productType: str
    batchNumber: str
    expiryDate: int
    location: str
    currency: str
    status: bool
    quantity: int
    price: int

    @classmethod
    def from_domain(cls, id: int, p: Product) -> "ProductOut":
        return cls(
            id=id,
            productId=p.product_id,
            name=p.name,
            origin=p.origin,
            documentHash=p.document_hash,
            timestamp=p.timestamp,
            manufacturer=p.manufacturer,
            productType=p.product_type,
            batchNumber=p.batch_number,
            expiryDate=p.expiry_date,
            location=p.location,
            currency=p.currency,
            status=p.status,
            quantity=p.quantity,
            price=p.price,
        )


class ProductUpdateOut(BaseModel):
    id: int
    updateName: str
    updateOrigin: str
    updateTimestamp: int
    updater: str

    @classmethod
    def from_domain(cls, id: int, u: ProductUpdate) -> "ProductUpdateOut":
        return cls(
            id=id,
            updateName=u.update_name,
            updateOrigin=u.update_origin,
            updateTimestamp=u.update_timestamp,
            updater=u.updater,
        )


class ProductCountResponse(BaseModel):
    count: int


class ProductExistenceResponse(BaseModel):
    productId: str
    exists: bool


class RegistrationErrorResponse(BaseModel):
    code: int
    error: str
    detail: Optional[str] = None
