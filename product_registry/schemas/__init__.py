from product_registry.schemas.products import (
    ProductRegisterRequest,
    ProductRegisterResponse,
    ProductUpdateRequest,
    ProductOut,
    ProductUpdateOut,
    ProductCountResponse,
    ProductExistenceResponse,
    RegistrationErrorResponse,
)
from product_registry.schemas.registry import (
    AuthorityContractRequest,
    RegistrationFeeRequest,
    OkResponse,
    RegistryConfigResponse,
)
from product_registry.schemas.ledger import FeeLedgerEntryOut, FeeLedgerResponse, FeeLedgerVerifyResponse
from product_registry.schemas.audit import AuditLogOut, AuditLogResponse
from product_registry.schemas.primitives import BIGINT_MAX, BIGINT_MIN, StoredInt
