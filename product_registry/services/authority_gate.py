# product_registry/services/authority_gate.py
from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from product_registry.core.types import RegistryState

logger = logging.getLogger(__name__)

# Reserved burn address; can never receive registration fees.
BURN_ADDRESS = "SP000000000000000000002Q6VF78"


class AuthorityVerifier(Protocol):
    """Answers whether a principal is a verified authority. How that is decided is not our concern."""

    def is_verified_authority(self, principal: str) -> bool: ...


class StaticAuthorityVerifier:
    """Fixed set of verified principals (settings or tests)."""

    def __init__(self, principals: Iterable[str] = ()):
        self.principals = set(principals)

    def is_verified_authority(self, principal: str) -> bool:
        return principal in self.principals


class AuthorityGate:
    """
    Authorization + fee configuration.

    - verified-authority lookups are delegated to the injected verifier
    - authority contract is settable exactly once, never to the burn address
    - registration fee may only change once an authority contract exists
    """

    def __init__(
        self,
        state: RegistryState,
        verifier: AuthorityVerifier,
        *,
        burn_address: str = BURN_ADDRESS,
    ):
        self.state = state
        self.verifier = verifier
        self.burn_address = burn_address

    def is_verified_authority(self, principal: str) -> bool:
        return bool(self.verifier.is_verified_authority(principal))

    @property
    def authority_contract(self) -> Optional[str]:
        return self.state.authority_contract

    @property
    def registration_fee(self) -> int:
        return self.state.registration_fee

    def set_authority_contract(self, address: str) -> bool:
        if address == self.burn_address:
            logger.warning("[authority] refused burn address as authority contract")
            return False
        if self.state.authority_contract is not None:
            logger.warning(
                "[authority] authority contract already set to %s; refusing %s",
                self.state.authority_contract,
                address,
            )
            return False

        self.state.authority_contract = address
        logger.info("[authority] authority contract set to %s", address)
        return True

    def set_registration_fee(self, fee: int) -> bool:
        if self.state.authority_contract is None:
            logger.warning("[authority] fee change refused: no authority contract configured")
            return False

        # unbounded; any integer is accepted
        self.state.registration_fee = fee
        logger.info("[authority] registration fee set to %s", fee)
        return True
