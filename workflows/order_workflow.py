import logging
from typing import List, Sequence
from uuid import UUID

from models.errors import OrderErrors, Result
from models.order import Order, OrderItem, OrderItemRequest
from models.tax import select_tax_policy
from stores.base import OrderConflictError, OrderStore
from utils.feature_flags import FeatureFlagSource

logger = logging.getLogger(__name__)


class OrderWorkflow:
    """Creates, taxes and stores orders, and serves them back to consumers.

    Business failures come back as failed Results; anything raised out of here
    is either a programming error or an infrastructure failure.
    """

    def __init__(self, store: OrderStore, feature_flags: FeatureFlagSource):
        self.store = store
        self.feature_flags = feature_flags

    async def create_order(self, external_id: str, items: Sequence[OrderItemRequest]) -> Result[Order]:
        if await self.store.exists(external_id):
            logger.info(f"Rejecting duplicate order with external_id {external_id}")
            return Result.failure(OrderErrors.duplicate(external_id))

        order = Order.create(
            external_id,
            [
                OrderItem(
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in items
            ],
        )
        order = order.mark_processing()

        # Flag is read per call so a flip applies to the very next order
        policy = select_tax_policy(self.feature_flags.is_reform_tax_enabled())
        order = order.apply_tax(policy.calculate(order.total_amount))
        order = order.mark_processed()
        logger.info(
            f"Order {order.id} ({external_id}) taxed with policy '{policy.name}': "
            f"total={order.total_amount} tax={order.tax_amount}"
        )

        try:
            await self.store.insert(order)
        except OrderConflictError:
            logger.info(f"Order with external_id {external_id} was stored concurrently, rejecting")
            return Result.failure(OrderErrors.duplicate(external_id))
        except Exception:
            # Insert is the only write, so nothing partial is left behind
            logger.error(f"Failed to persist order {order.id} ({external_id})", exc_info=True)
            raise

        return Result.success(order)

    async def get_order_by_id(self, order_id: UUID) -> Result[Order]:
        order = await self.store.get(order_id)
        if order is None:
            return Result.failure(OrderErrors.not_found(order_id))
        return Result.success(order)

    async def get_order_by_external_id(self, external_id: str) -> Result[Order]:
        order = await self.store.get_by_external_id(external_id)
        if order is None:
            return Result.failure(OrderErrors.not_found_by_external_id(external_id))
        return Result.success(order)

    async def list_all_orders(self) -> List[Order]:
        return await self.store.list_all()

    async def list_processed_orders(self) -> List[Order]:
        return await self.store.list_processed()
