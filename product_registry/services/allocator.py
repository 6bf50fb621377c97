from __future__ import annotations

from product_registry.core.types import RegistryState


class IdentifierAllocator:
    """
    Dense sequential ids over RegistryState.next_product_id.

    next_id() only peeks; advance() is called once the product is stored.
    Ids are never reused.
    """

    def __init__(self, state: RegistryState):
        self.state = state

    def next_id(self) -> int:
        return self.state.next_product_id

    def advance(self) -> int:
        self.state.next_product_id += 1
        return self.state.next_product_id

    def capacity_remaining(self) -> bool:
        return self.state.next_product_id < self.state.max_products
