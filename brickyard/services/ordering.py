"""
Order placement.

Creating an order, taking its bricks out of stock and marking its tractor as
assigned happen in one store transaction: either all three land or none do.
"""
import structlog

from ..schemas.orders import Order, OrderCreate
from ..schemas.tractors import TractorPatch, TractorStatus
from ..storage.provider import EntityStore


logger = structlog.get_logger(__name__)


class InsufficientStockError(ValueError):
    def __init__(self, brick_id: str, available: int, requested: int):
        super().__init__(f"Insufficient stock for brick {brick_id}: {available} available, {requested} requested")
        self.brick_id = brick_id
        self.available = available
        self.requested = requested


def place_order(store: EntityStore, data: OrderCreate, enforce_stock_floor: bool = True) -> Order:
    with store.transaction():
        brick = store.bricks.get(data.brick_type)
        if brick is not None and enforce_stock_floor and brick.current_stock < data.quantity:
            raise InsufficientStockError(brick.id, brick.current_stock, data.quantity)

        order = store.orders.create(data)

        # An unknown brick does not block the order; there is just no stock to move
        if brick is not None:
            remaining = brick.current_stock - data.quantity
            store.bricks.update_stock(brick.id, remaining)
            logger.info("stock_adjusted", brick_id=brick.id, previous=brick.current_stock, current=remaining)

        if data.assigned_tractor_id:
            tractor = store.tractors.update(data.assigned_tractor_id, TractorPatch(status=TractorStatus.assigned))
            if tractor is not None:
                logger.info("tractor_assigned", tractor_id=tractor.id, order_id=order.id)

    logger.info("order_placed", order_id=order.id, order_number=order.order_number, quantity=order.quantity)
    return order
