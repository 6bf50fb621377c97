# product_registry/api/v1/registry.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from product_registry.core.auth_deps import get_authority_verifier, get_call_context
from product_registry.core.types import CallContext
from product_registry.db.session import get_db
from product_registry.schemas.registry import (
    AuthorityContractRequest,
    OkResponse,
    RegistrationFeeRequest,
    RegistryConfigResponse,
)
from product_registry.services.audit_service import AuditAction, AuditService
from product_registry.services.authority_gate import AuthorityVerifier
from product_registry.services.registry_session import registry_snapshot, registry_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registry")


@router.get("/config", response_model=RegistryConfigResponse)
async def get_registry_config(
    db: Session = Depends(get_db),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    svc = registry_snapshot(db, verifier=verifier)
    return RegistryConfigResponse(
        authorityContract=svc.authority_contract,
        registrationFee=svc.registration_fee,
        maxProducts=svc.state.max_products,
        productCount=svc.get_product_count(),
    )


@router.put("/authority-contract", response_model=OkResponse)
async def set_authority_contract(
    payload: AuthorityContractRequest,
    request: Request,
    db: Session = Depends(get_db),
    ctx: CallContext = Depends(get_call_context),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    with registry_transaction(db, verifier=verifier) as svc:
        ok = svc.set_authority_contract(ctx, payload.address)
        AuditService().write(
            db,
            actor=ctx.caller,
            action=AuditAction.AUTHORITY_CONTRACT_SET if ok else AuditAction.CONFIG_CHANGE_REJECTED,
            request_id=getattr(request.state, "request_id", None),
            clock=ctx.clock,
            status="ok" if ok else "rejected",
            details={"authorityContract": payload.address},
        )

    if not ok:
        raise HTTPException(status_code=400, detail="Authority contract change rejected.")
    return OkResponse()


@router.put("/registration-fee", response_model=OkResponse)
async def set_registration_fee(
    payload: RegistrationFeeRequest,
    request: Request,
    db: Session = Depends(get_db),
    ctx: CallContext = Depends(get_call_context),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    with registry_transaction(db, verifier=verifier) as svc:
        ok = svc.set_registration_fee(ctx, payload.fee)
        AuditService().write(
            db,
            actor=ctx.caller,
            action=AuditAction.REGISTRATION_FEE_SET if ok else AuditAction.CONFIG_CHANGE_REJECTED,
            request_id=getattr(request.state, "request_id", None),
            clock=ctx.clock,
            status="ok" if ok else "rejected",
            details={"registrationFee": payload.fee},
        )

    if not ok:
        raise HTTPException(status_code=400, detail="Registration fee change rejected.")
    return OkResponse()
