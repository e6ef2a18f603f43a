from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from models.order import Order


class OrderConflictError(Exception):
    """Raised by a store when an insert would break external id uniqueness."""

    def __init__(self, external_id: str):
        self.external_id = external_id
        super().__init__(f"Order with external id '{external_id}' already stored")


class OrderStore(ABC):
    """Persistence for orders, keyed by internal id and external id.

    `insert` must be atomic with respect to external id uniqueness: of several
    concurrent inserts for the same external id, exactly one succeeds and the
    rest raise OrderConflictError.
    """

    @abstractmethod
    async def exists(self, external_id: str) -> bool:
        ...

    @abstractmethod
    async def insert(self, order: Order) -> None:
        ...

    @abstractmethod
    async def get(self, order_id: UUID) -> Optional[Order]:
        ...

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[Order]:
        ...

    @abstractmethod
    async def list_all(self) -> List[Order]:
        ...

    @abstractmethod
    async def list_processed(self) -> List[Order]:
        ...

    async def close(self) -> None:
        pass
