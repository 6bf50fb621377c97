# product_registry/services/registry_service.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence, Tuple

from product_registry.core.errors import ErrorKind, RegistrationError
from product_registry.core.types import (
    CallContext,
    Product,
    ProductRegistration,
    ProductUpdate,
    RegistryState,
)
from product_registry.services.allocator import IdentifierAllocator
from product_registry.services.authority_gate import BURN_ADDRESS, AuthorityGate, AuthorityVerifier
from product_registry.services.fee_transfer import FeeTransfer
from product_registry.services.product_store import ProductStore
from product_registry.services.validator import first_field_violation, is_valid_amendment

logger = logging.getLogger(__name__)

Guard = Tuple[ErrorKind, Callable[[], bool]]


class RegistryService:
    """
    Product registry state machine.

    register_product: ordered guards -> fee transfer -> allocate -> insert -> advance
    update_product:   existence -> ownership -> name/origin -> apply

    Every public operation runs inside one critical section, so no other
    operation can observe a half-finished registration.
    """

    def __init__(
        self,
        *,
        state: RegistryState,
        store: ProductStore,
        verifier: AuthorityVerifier,
        fee_transfer: FeeTransfer,
        burn_address: str = BURN_ADDRESS,
    ):
        self.state = state
        self.store = store
        self.fee_transfer = fee_transfer
        self.allocator = IdentifierAllocator(state)
        self.gate = AuthorityGate(state, verifier, burn_address=burn_address)
        self._lock = threading.RLock()

    # ---------------------------
    # REGISTRATION
    # ---------------------------

    def _caller_guards(self, ctx: CallContext, registration: ProductRegistration) -> Sequence[Guard]:
        """Checks that run once every field rule has passed."""
        return (
            (ErrorKind.NOT_AUTHORIZED, lambda: self.gate.is_verified_authority(ctx.caller)),
            (ErrorKind.PRODUCT_ALREADY_EXISTS, lambda: not self.store.contains(registration.product_id)),
            (ErrorKind.AUTHORITY_NOT_VERIFIED, lambda: self.gate.authority_contract is not None),
        )

    def _first_failure(self, ctx: CallContext, registration: ProductRegistration) -> Optional[ErrorKind]:
        """
        Checks in evaluation order:
        capacity, then the field rules, then caller / uniqueness / authority contract.
        """
        if not self.allocator.capacity_remaining():
            return ErrorKind.MAX_PRODUCTS_EXCEEDED

        field_failure = first_field_violation(registration, ctx.clock)
        if field_failure is not None:
            return field_failure

        for kind, check in self._caller_guards(ctx, registration):
            if not check():
                return kind
        return None

    def register_product(self, ctx: CallContext, registration: ProductRegistration) -> int:
        """
        Registers a product on behalf of ctx.caller and returns its sequential id.

        Raises RegistrationError(kind) for the first failing rule.
        A FeeTransferError from the fee collaborator propagates; nothing is stored in that case.
        """
        with self._lock:
            failure = self._first_failure(ctx, registration)
            if failure is not None:
                logger.info(
                    "[registry] registration rejected product_id=%r caller=%s kind=%s",
                    registration.product_id,
                    ctx.caller,
                    failure.name,
                )
                raise RegistrationError(failure)

            fee = self.gate.registration_fee
            contract = self.gate.authority_contract
            self.fee_transfer.transfer(fee, ctx.caller, contract, memo=registration.product_id)

            new_id = self.allocator.next_id()
            product = Product(
                product_id=registration.product_id,
                name=registration.name,
                origin=registration.origin,
                document_hash=registration.document_hash,
                timestamp=ctx.clock,
                manufacturer=ctx.caller,
                product_type=registration.product_type,
                batch_number=registration.batch_number,
                expiry_date=registration.expiry_date,
                location=registration.location,
                currency=registration.currency,
                status=True,
                quantity=registration.quantity,
                price=registration.price,
            )
            self.store.insert(new_id, product)
            self.allocator.advance()

            logger.info(
                "[registry] registered id=%s product_id=%r manufacturer=%s fee=%s",
                new_id,
                registration.product_id,
                ctx.caller,
                fee,
            )
            return new_id

    # ---------------------------
    # AMENDMENT
    # ---------------------------

    def update_product(self, ctx: CallContext, id: int, name: str, origin: str) -> bool:
        """
        Amends name/origin of product `id`.

        Returns False, without touching state, when the product does not exist,
        the caller is not its manufacturer, or the new values are invalid.
        """
        with self._lock:
            product = self.store.get(id)
            if product is None:
                logger.info("[registry] update rejected id=%s: not found", id)
                return False
            if product.manufacturer != ctx.caller:
                logger.info("[registry] update rejected id=%s: caller %s is not manufacturer", id, ctx.caller)
                return False
            if not is_valid_amendment(name, origin):
                logger.info("[registry] update rejected id=%s: invalid name/origin", id)
                return False

            self.store.apply_update(
                id,
                name=name,
                origin=origin,
                timestamp=ctx.clock,
                updater=ctx.caller,
            )
            logger.info("[registry] updated id=%s by %s at %s", id, ctx.caller, ctx.clock)
            return True

    # ---------------------------
    # CONFIGURATION
    # ---------------------------

    def set_authority_contract(self, ctx: CallContext, address: str) -> bool:
        with self._lock:
            logger.info("[registry] set_authority_contract requested by %s", ctx.caller)
            return self.gate.set_authority_contract(address)

    def set_registration_fee(self, ctx: CallContext, fee: int) -> bool:
        with self._lock:
            logger.info("[registry] set_registration_fee requested by %s", ctx.caller)
            return self.gate.set_registration_fee(fee)

    # ---------------------------
    # READS
    # ---------------------------

    def get_product(self, id: int) -> Optional[Product]:
        with self._lock:
            return self.store.get(id)

    def get_product_update(self, id: int) -> Optional[ProductUpdate]:
        with self._lock:
            return self.store.get_update(id)

    def get_product_count(self) -> int:
        with self._lock:
            return self.state.next_product_id

    def check_product_existence(self, product_id: str) -> bool:
        with self._lock:
            return self.store.contains(product_id)

    @property
    def authority_contract(self) -> Optional[str]:
        return self.gate.authority_contract

    @property
    def registration_fee(self) -> int:
        return self.gate.registration_fee
