import pytest

from brickyard.schemas.invoices import InvoiceCreate
from brickyard.schemas.laborers import LaborerCreate
from brickyard.schemas.tractors import TractorCreate
from brickyard.services.ordering import InsufficientStockError, place_order
from brickyard.services.statistics import compute_statistics


def test_place_order_moves_stock_and_assigns_tractor(store, red_clay, order_factory):
    brick = store.bricks.create(red_clay)
    tractor = store.tractors.create(TractorCreate(registration_number="LHR-1", model="MF 385"))

    order = place_order(store, order_factory(brick.id, assigned_tractor_id=tractor.id))

    assert order.order_number == "ORD001"
    assert store.bricks.get(brick.id).current_stock == 4900
    assert store.tractors.get(tractor.id).status == "assigned"
    assert store.tractors.list_available() == []


def test_place_order_without_known_brick_still_creates_order(store, order_factory):
    order = place_order(store, order_factory("unknown-brick"))
    assert store.orders.get(order.id) is not None


def test_place_order_with_unknown_tractor(store, red_clay, order_factory):
    brick = store.bricks.create(red_clay)
    order = place_order(store, order_factory(brick.id, assigned_tractor_id="ghost"))
    assert order.assigned_tractor_id == "ghost"
    assert store.bricks.get(brick.id).current_stock == 4900


def test_insufficient_stock_leaves_nothing_behind(store, red_clay, order_factory):
    brick = store.bricks.create(red_clay)
    tractor = store.tractors.create(TractorCreate(registration_number="LHR-1", model="MF 385"))

    with pytest.raises(InsufficientStockError) as excinfo:
        place_order(store, order_factory(brick.id, quantity=5001, assigned_tractor_id=tractor.id))

    assert excinfo.value.available == 5000
    assert store.orders.list() == []
    assert store.bricks.get(brick.id).current_stock == 5000
    assert store.tractors.get(tractor.id).status == "available"


def test_stock_floor_can_be_disabled(store, red_clay, order_factory):
    brick = store.bricks.create(red_clay)
    place_order(store, order_factory(brick.id, quantity=6000), enforce_stock_floor=False)
    assert store.bricks.get(brick.id).current_stock == -1000


def test_statistics_after_order(store, red_clay, order_factory):
    brick = store.bricks.create(red_clay)
    place_order(store, order_factory(brick.id))

    stats = compute_statistics(store)
    assert stats.total_bricks == 4900
    assert stats.pending_orders == 1
    assert brick.id not in [b.id for b in stats.low_stock_bricks]


def test_statistics_rollup(store, red_clay, order_factory):
    store.bricks.create(red_clay)
    low = store.bricks.create(red_clay.model_copy(update={"type": "Fly Ash", "current_stock": 1000}))
    store.tractors.create(TractorCreate(registration_number="A", model="m"))
    store.tractors.create(TractorCreate(registration_number="B", model="m", status="maintenance"))
    store.laborers.create(LaborerCreate(name="Rashid", phone="1", monthly_salary="32000"))
    store.laborers.create(LaborerCreate(name="Bilal", phone="2", monthly_salary="30000", status="on_leave"))
    store.orders.create(order_factory("x", status="delivered"))
    for total, status in (("100.50", "paid"), ("200.25", "paid"), ("999.00", "pending")):
        store.invoices.create(
            InvoiceCreate(
                order_id="x",
                customer_name="c",
                customer_address="a",
                delivery_address="d",
                items="[]",
                subtotal=total,
                tax_amount="0",
                total_amount=total,
                payment_status=status,
            )
        )

    stats = compute_statistics(store)
    assert stats.total_bricks == 6000
    assert stats.available_tractors == 1
    assert stats.active_laborers == 1
    assert stats.pending_orders == 0
    assert stats.total_sales == pytest.approx(300.75)
    # The threshold is inclusive
    assert [b.id for b in stats.low_stock_bricks] == [low.id]


def test_statistics_on_empty_store(store):
    stats = compute_statistics(store)
    assert stats.total_bricks == 0
    assert stats.total_sales == 0
    assert stats.low_stock_bricks == []
