import threading
from typing import Dict, List, Optional
from uuid import UUID

from models.order import Order, OrderStatus
from stores.base import OrderConflictError, OrderStore


class InMemoryOrderStore(OrderStore):
    """Process-local store backed by two dicts under one lock."""

    def __init__(self):
        self._orders: Dict[UUID, Order] = {}
        self._ids_by_external_id: Dict[str, UUID] = {}
        self._lock = threading.Lock()

    async def exists(self, external_id: str) -> bool:
        with self._lock:
            return external_id in self._ids_by_external_id

    async def insert(self, order: Order) -> None:
        with self._lock:
            if order.external_id in self._ids_by_external_id or order.id in self._orders:
                raise OrderConflictError(order.external_id)
            self._orders[order.id] = order
            self._ids_by_external_id[order.external_id] = order.id

    async def get(self, order_id: UUID) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    async def get_by_external_id(self, external_id: str) -> Optional[Order]:
        with self._lock:
            order_id = self._ids_by_external_id.get(external_id)
            return self._orders.get(order_id) if order_id is not None else None

    async def list_all(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    async def list_processed(self) -> List[Order]:
        with self._lock:
            return [o for o in self._orders.values() if o.status == OrderStatus.PROCESSED]
