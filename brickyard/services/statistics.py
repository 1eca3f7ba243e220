from decimal import Decimal

from ..schemas.statistics import Statistics
from ..storage.provider import EntityStore


def compute_statistics(store: EntityStore) -> Statistics:
    """Dashboard rollup, recomputed from the store on every call."""
    bricks = store.bricks.list()
    tractors = store.tractors.list()
    laborers = store.laborers.list()
    orders = store.orders.list()
    invoices = store.invoices.list()

    total_sales = sum(
        (Decimal(invoice.total_amount) for invoice in invoices if invoice.payment_status == "paid"),
        Decimal("0"),
    )

    return Statistics(
        total_bricks=sum(brick.current_stock for brick in bricks),
        available_tractors=sum(1 for t in tractors if t.status == "available"),
        active_laborers=sum(1 for laborer in laborers if laborer.status == "active"),
        pending_orders=sum(1 for o in orders if o.status == "pending"),
        total_sales=float(total_sales),
        low_stock_bricks=[brick for brick in bricks if brick.current_stock <= brick.min_stock],
    )
