# product_registry/api/v1/products.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from product_registry.core.auth_deps import get_authority_verifier, get_call_context
from product_registry.core.errors import ErrorKind, FeeTransferError, RegistrationError
from product_registry.core.types import CallContext
from product_registry.db.session import get_db
from product_registry.schemas.products import (
    ProductCountResponse,
    ProductExistenceResponse,
    ProductOut,
    ProductRegisterRequest,
    ProductRegisterResponse,
    ProductUpdateOut,
    ProductUpdateRequest,
)
from product_registry.schemas.registry import OkResponse
from product_registry.services.audit_service import AuditAction, AuditService
from product_registry.services.authority_gate import AuthorityVerifier
from product_registry.services.registry_session import registry_snapshot, registry_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products")


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

_STATUS_BY_KIND = {
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.PRODUCT_ALREADY_EXISTS: 409,
}


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _audit_rejection(
    db: Session,
    *,
    request: Request,
    ctx: CallContext,
    action: str,
    details: dict,
    product_ref: Optional[int] = None,
) -> None:
    # the registry transaction has already rolled back; this is a fresh one
    AuditService().write(
        db,
        actor=ctx.caller,
        action=action,
        request_id=_request_id(request),
        details=details,
        product_ref=product_ref,
        clock=ctx.clock,
        status="rejected",
    )
    db.commit()


# ─────────────────────────────────────────────────────────────
# REGISTER
# ─────────────────────────────────────────────────────────────

@router.post("", response_model=ProductRegisterResponse, status_code=201)
async def register_product(
    payload: ProductRegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    ctx: CallContext = Depends(get_call_context),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    registration = payload.to_registration()

    try:
        with registry_transaction(db, verifier=verifier) as svc:
            new_id = svc.register_product(ctx, registration)
            AuditService().write(
                db,
                actor=ctx.caller,
                action=AuditAction.PRODUCT_REGISTERED,
                request_id=_request_id(request),
                product_ref=new_id,
                clock=ctx.clock,
                details={
                    "productId": registration.product_id,
                    "fee": svc.registration_fee,
                    "authorityContract": svc.authority_contract,
                },
            )
    except RegistrationError as exc:
        _audit_rejection(
            db,
            request=request,
            ctx=ctx,
            action=AuditAction.PRODUCT_REGISTRATION_REJECTED,
            details={"productId": registration.product_id, "code": int(exc.kind), "error": exc.kind.name},
        )
        raise HTTPException(
            status_code=_STATUS_BY_KIND.get(exc.kind, 400),
            detail={"code": int(exc.kind), "error": exc.kind.name},
        )
    except FeeTransferError as exc:
        logger.warning("[products] fee transfer failed for %r: %s", registration.product_id, exc)
        raise HTTPException(status_code=402, detail=f"Registration fee transfer failed: {exc}")

    return ProductRegisterResponse(id=new_id)


# ─────────────────────────────────────────────────────────────
# READS (static paths first so they are not captured by /{id})
# ─────────────────────────────────────────────────────────────

@router.get("/count", response_model=ProductCountResponse)
async def get_product_count(
    db: Session = Depends(get_db),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    svc = registry_snapshot(db, verifier=verifier)
    return ProductCountResponse(count=svc.get_product_count())


@router.get("/exists/{product_id}", response_model=ProductExistenceResponse)
async def check_product_existence(
    product_id: str,
    db: Session = Depends(get_db),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    svc = registry_snapshot(db, verifier=verifier)
    return ProductExistenceResponse(productId=product_id, exists=svc.check_product_existence(product_id))


@router.get("/{id}", response_model=ProductOut)
async def get_product(
    id: int,
    db: Session = Depends(get_db),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    product = registry_snapshot(db, verifier=verifier).get_product(id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    return ProductOut.from_domain(id, product)


@router.get("/{id}/update", response_model=ProductUpdateOut)
async def get_product_update(
    id: int,
    db: Session = Depends(get_db),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    update = registry_snapshot(db, verifier=verifier).get_product_update(id)
    if update is None:
        raise HTTPException(status_code=404, detail="No update recorded for this product.")
    return ProductUpdateOut.from_domain(id, update)


# ─────────────────────────────────────────────────────────────
# UPDATE
# ─────────────────────────────────────────────────────────────

@router.patch("/{id}", response_model=OkResponse)
async def update_product(
    id: int,
    payload: ProductUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    ctx: CallContext = Depends(get_call_context),
    verifier: AuthorityVerifier = Depends(get_authority_verifier),
):
    with registry_transaction(db, verifier=verifier) as svc:
        ok = svc.update_product(ctx, id, payload.name, payload.origin)
        if ok:
            AuditService().write(
                db,
                actor=ctx.caller,
                action=AuditAction.PRODUCT_UPDATED,
                request_id=_request_id(request),
                product_ref=id,
                clock=ctx.clock,
                details={"name": payload.name, "origin": payload.origin},
            )

    if not ok:
        _audit_rejection(
            db,
            request=request,
            ctx=ctx,
            action=AuditAction.PRODUCT_UPDATE_REJECTED,
            product_ref=id,
            details={"name": payload.name, "origin": payload.origin},
        )
        # not-found, not-owner and bad fields are deliberately indistinguishable
        raise HTTPException(status_code=400, detail="Product update rejected.")

    return OkResponse()
