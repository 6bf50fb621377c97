from fastapi import APIRouter

from product_registry.api.v1.health import router as health_router
from product_registry.api.v1.products import router as products_router
from product_registry.api.v1.registry import router as registry_router
from product_registry.api.v1.ledger import router as ledger_router
from product_registry.api.v1.audit import router as audit_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])

# ------------------------------------------------------------------
# REGISTRY
# ------------------------------------------------------------------
v1_router.include_router(products_router, tags=["products"])
v1_router.include_router(registry_router, tags=["registry"])

# ------------------------------------------------------------------
# LEDGER / AUDIT
# ------------------------------------------------------------------
v1_router.include_router(ledger_router, tags=["ledger"])
v1_router.include_router(audit_router, tags=["audit"])
