"""
Invoice pricing.

`calculate_invoice` is a pure function of (order, brick catalog, settings,
issue time): the same inputs always produce the same draft. Money is handled
as Decimal; line amounts are exact (quantity x rate) and only the tax is
rounded, half-up to cents.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Iterable, Mapping, Optional

import structlog

from ..schemas.bricks import Brick
from ..schemas.common import within_money_bounds
from ..schemas.invoices import Invoice, InvoiceDraft, LineItem
from ..schemas.orders import Order
from ..storage.provider import EntityStore


logger = structlog.get_logger(__name__)

DEFAULT_DELIVERY_CHARGE = Decimal("2500")
DEFAULT_LABOR_CHARGE = Decimal("1000")
DEFAULT_TAX_RATE = Decimal("0.18")  # a fraction, not a percentage
DEFAULT_DUE_DAYS = 30

CENT = Decimal("0.01")
# Enough digits for bounded amounts times a bounded quantity and tax rate
MONEY_PRECISION = 50


class BrickNotFoundError(LookupError):
    """The order references a brick that is no longer in the catalog."""


class InvoiceAlreadyExistsError(ValueError):
    pass


class OrderNotFoundError(LookupError):
    pass


class InvoiceAmountError(ValueError):
    """A computed amount is too large to be stored as money."""


def setting_decimal(settings: Mapping[str, str], key: str, default: Decimal) -> Decimal:
    raw = settings.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        value = None
    if value is None or value < 0 or not within_money_bounds(value):
        logger.warning("invalid_setting_value", key=key, value=raw, fallback=str(default))
        return default
    return value


def format_money(value: Decimal) -> str:
    # At least two decimals, never drop precision
    if value.as_tuple().exponent > -2:
        value = value.quantize(CENT)
    return str(value)


def invoice_reference(order: Order) -> str:
    if order.order_number:
        return f"INV-{order.order_number}"
    return f"INV-{order.id[:8].upper()}"


def _find_brick(bricks, brick_id: str) -> Optional[Brick]:
    if isinstance(bricks, Mapping):
        return bricks.get(brick_id)
    for brick in bricks:
        if brick.id == brick_id:
            return brick
    return None


def calculate_invoice(
    order: Order,
    bricks: Iterable[Brick],
    settings: Mapping[str, str],
    issued_at: datetime,
    due_days: int = DEFAULT_DUE_DAYS,
) -> InvoiceDraft:
    """Price an order into an invoice draft.

    The brick rate is the order's own unit price, so catalog price changes
    after the order was placed do not affect the invoice. Delivery and labor
    are flat single-quantity lines.

    Raises BrickNotFoundError when the order's brick is not in ``bricks``, and
    InvoiceAmountError when a total falls outside what a money field can hold.
    """
    brick = _find_brick(bricks, order.brick_type)
    if brick is None:
        raise BrickNotFoundError(f"Brick {order.brick_type} not found")

    rate = Decimal(order.unit_price)
    delivery_charge = setting_decimal(settings, "deliveryCharge", DEFAULT_DELIVERY_CHARGE)
    labor_charge = setting_decimal(settings, "laborCharge", DEFAULT_LABOR_CHARGE)
    tax_rate = setting_decimal(settings, "taxRate", DEFAULT_TAX_RATE)

    with localcontext() as ctx:
        ctx.prec = MONEY_PRECISION
        brick_amount = rate * order.quantity
        subtotal = brick_amount + delivery_charge + labor_charge
        tax_amount = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        total_amount = subtotal + tax_amount

    for amount in (brick_amount, subtotal, tax_amount, total_amount):
        if not within_money_bounds(amount):
            raise InvoiceAmountError(f"Invoice amount {amount} for order {order.id} is out of range")

    items = [
        LineItem(
            description=f"{brick.type} (Standard Size)",
            quantity=order.quantity,
            rate=format_money(rate),
            amount=format_money(brick_amount),
        ),
        LineItem(
            description="Delivery Charges",
            quantity=1,
            rate=format_money(delivery_charge),
            amount=format_money(delivery_charge),
        ),
        LineItem(
            description="Labor Charges",
            quantity=1,
            rate=format_money(labor_charge),
            amount=format_money(labor_charge),
        ),
    ]

    return InvoiceDraft(
        order_id=order.id,
        invoice_number=invoice_reference(order),
        customer_name=order.customer_name,
        customer_address=order.customer_address,
        delivery_address=order.delivery_address,
        items=items,
        subtotal=format_money(subtotal),
        tax_amount=format_money(tax_amount),
        total_amount=format_money(total_amount),
        due_date=issued_at + timedelta(days=due_days),
    )


def preview_invoice(store: EntityStore, order_id: str, due_days: int = DEFAULT_DUE_DAYS) -> InvoiceDraft:
    order = store.orders.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return calculate_invoice(
        order,
        store.bricks.list(),
        store.settings.as_mapping(),
        issued_at=datetime.now(timezone.utc),
        due_days=due_days,
    )


def generate_invoice(
    store: EntityStore,
    order_id: str,
    single_invoice_per_order: bool = True,
    due_days: int = DEFAULT_DUE_DAYS,
) -> Invoice:
    """Price an order with the current catalog and settings and store the invoice."""
    with store.transaction():
        if single_invoice_per_order and store.invoices.get_by_order_id(order_id) is not None:
            raise InvoiceAlreadyExistsError(f"Order {order_id} already has an invoice")
        draft = preview_invoice(store, order_id, due_days=due_days)
        invoice = store.invoices.create(draft.to_create())
    logger.info(
        "invoice_created",
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        order_id=order_id,
        total_amount=invoice.total_amount,
    )
    return invoice
