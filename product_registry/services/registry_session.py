# product_registry/services/registry_session.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from product_registry.core.config import Settings, get_settings
from product_registry.core.types import RegistryState
from product_registry.models.registry_config import SINGLETON_ID, RegistryConfig
from product_registry.services.authority_gate import AuthorityVerifier
from product_registry.services.fee_transfer import LedgerFeeTransfer
from product_registry.services.registry_service import RegistryService
from product_registry.services.sql_product_store import SqlProductStore

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def ensure_config_row(db: Session, settings: Settings) -> bool:
    """
    Insert the singleton config row from settings unless it already exists.
    Safe when two sessions race on an empty database: the loser inserts nothing.
    Returns True when this call created the row.
    """
    values = dict(
        id=SINGLETON_ID,
        next_product_id=0,
        max_products=settings.max_products,
        registration_fee=settings.registration_fee,
        authority_contract=None,
    )

    upsert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if upsert is not None:
        stmt = upsert(RegistryConfig).values(**values).on_conflict_do_nothing(index_elements=["id"])
        created = db.execute(stmt).rowcount == 1
    else:
        try:
            with db.begin_nested():
                db.execute(insert(RegistryConfig).values(**values))
            created = True
        except IntegrityError:
            created = False

    if created:
        logger.info(
            "[registry] initialised config max_products=%s fee=%s",
            settings.max_products,
            settings.registration_fee,
        )
    return created


def load_config_for_update(db: Session, settings: Settings) -> RegistryConfig:
    """
    Lock the singleton config row (FOR UPDATE) to serialize registry operations.
    Creates it from settings on first use.
    """
    stmt = select(RegistryConfig).where(RegistryConfig.id == SINGLETON_ID).with_for_update()

    row = db.execute(stmt).scalar_one_or_none()
    if row is None:
        ensure_config_row(db, settings)
        row = db.execute(stmt).scalar_one()

    return row


def registry_snapshot(
    db: Session,
    *,
    verifier: AuthorityVerifier,
    settings: Optional[Settings] = None,
) -> RegistryService:
    """
    Read-only view for lookups: no row lock, nothing written.
    Before the first write the defaults from settings are reported.
    """
    settings = settings or get_settings()

    row = db.get(RegistryConfig, SINGLETON_ID)
    if row is not None:
        state = row.to_state()
    else:
        state = RegistryState(
            max_products=settings.max_products,
            registration_fee=settings.registration_fee,
        )

    return RegistryService(
        state=state,
        store=SqlProductStore(db),
        verifier=verifier,
        fee_transfer=LedgerFeeTransfer(db),
        burn_address=settings.burn_address,
    )


@contextmanager
def registry_transaction(
    db: Session,
    *,
    verifier: AuthorityVerifier,
    settings: Optional[Settings] = None,
) -> Iterator[RegistryService]:
    """
    One registry operation = one database transaction.

    - config row locked, state loaded
    - RegistryService over SqlProductStore + LedgerFeeTransfer (same session)
    - on success: state written back, commit
    - on any exception: rollback, re-raise
    """
    settings = settings or get_settings()

    try:
        row = load_config_for_update(db, settings)
        state = row.to_state()
        svc = RegistryService(
            state=state,
            store=SqlProductStore(db),
            verifier=verifier,
            fee_transfer=LedgerFeeTransfer(db),
            burn_address=settings.burn_address,
        )

        yield svc

        row.apply_state(state)
        db.commit()
    except Exception:
        db.rollback()
        raise
