# product_registry/models/registry_config.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, BigInteger, Integer, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from product_registry.core.types import RegistryState
from product_registry.db.base import Base

SINGLETON_ID = 1


class RegistryConfig(Base):
    """
    Singleton row holding the registry-wide counters and configuration.
    Read FOR UPDATE at the start of every registry operation.
    """

    __tablename__ = "registry_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)

    next_product_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_products: Mapped[int] = mapped_column(Integer, nullable=False)
    registration_fee: Mapped[int] = mapped_column(BigInteger, nullable=False)
    authority_contract: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("id = 1", name="ck_registry_config_singleton"),
        CheckConstraint("next_product_id >= 0", name="ck_registry_config_next_id"),
    )

    def to_state(self) -> RegistryState:
        return RegistryState(
            next_product_id=self.next_product_id,
            max_products=self.max_products,
            registration_fee=self.registration_fee,
            authority_contract=self.authority_contract,
        )

    def apply_state(self, state: RegistryState) -> None:
        self.next_product_id = state.next_product_id
        self.max_products = state.max_products
        self.registration_fee = state.registration_fee
        self.authority_contract = state.authority_contract
