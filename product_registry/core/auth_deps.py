# product_registry/core/auth_deps.py
from __future__ import annotations

import time

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from product_registry.core.config import get_settings
from product_registry.core.security import decode_token
from product_registry.core.types import CallContext
from product_registry.services.authority_gate import AuthorityVerifier, StaticAuthorityVerifier

bearer = HTTPBearer(auto_error=False)


def get_current_caller(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> str:
    """
    Canonical authentication dependency.
    The token subject is the opaque caller principal; it is never resolved further.
    """
    if creds is None:
        raise HTTPException(status_code=401, detail="Missing bearer token.")

    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    caller = payload.get("sub")
    if not caller:
        raise HTTPException(status_code=401, detail="Token missing subject claim.")

    # Make caller available to downstream middleware / handlers
    request.state.caller = str(caller)
    return str(caller)


def get_clock() -> int:
    """Logical clock for one request: UNIX time in seconds."""
    return int(time.time())


def get_call_context(
    caller: str = Depends(get_current_caller),
    clock: int = Depends(get_clock),
) -> CallContext:
    return CallContext(caller=caller, clock=clock)


def get_authority_verifier() -> AuthorityVerifier:
    return StaticAuthorityVerifier(get_settings().verified_authorities)
