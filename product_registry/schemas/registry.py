from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from product_registry.schemas.primitives import StoredInt


class AuthorityContractRequest(BaseModel):
    address: str = Field(..., min_length=1, max_length=128)


class RegistrationFeeRequest(BaseModel):
    fee: StoredInt


class OkResponse(BaseModel):
    ok: bool = True


class RegistryConfigResponse(BaseModel):
    authorityContract: Optional[str] = None
    registrationFee: int
    maxProducts: int
    productCount: int
