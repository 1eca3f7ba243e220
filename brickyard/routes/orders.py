from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from ..db import get_store
from ..schemas.invoices import Invoice, InvoiceDraft
from ..schemas.orders import Order, OrderCreate, OrderPatch
from ..services.invoicing import (
    BrickNotFoundError,
    InvoiceAlreadyExistsError,
    InvoiceAmountError,
    OrderNotFoundError,
    generate_invoice,
    preview_invoice,
)
from ..services.ordering import InsufficientStockError, place_order
from ..storage.provider import EntityStore


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=List[Order])
def list_orders(store: EntityStore = Depends(get_store)):
    return store.orders.list()


@router.get("/status/{status}", response_model=List[Order])
def list_orders_by_status(status: str, store: EntityStore = Depends(get_store)):
    return store.orders.list_by_status(status)


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, store: EntityStore = Depends(get_store)):
    order = store.orders.get(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("", response_model=Order, status_code=201)
def create_order(payload: OrderCreate, store: EntityStore = Depends(get_store)):
    try:
        return place_order(store, payload, enforce_stock_floor=settings.enforce_stock_floor)
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}", response_model=Order)
def update_order(order_id: str, payload: OrderPatch, store: EntityStore = Depends(get_store)):
    order = store.orders.update(order_id, payload)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, store: EntityStore = Depends(get_store)):
    if not store.orders.delete(order_id):
        raise HTTPException(status_code=404, detail="Order not found")
    return Response(status_code=204)


# ---------- INVOICING ----------
@router.get("/{order_id}/invoice/preview", response_model=InvoiceDraft)
def preview_order_invoice(order_id: str, store: EntityStore = Depends(get_store)):
    try:
        return preview_invoice(store, order_id, due_days=settings.invoice_due_days)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except (BrickNotFoundError, InvoiceAmountError) as e:
        raise HTTPException(status_code=400, detail=f"Cannot price order: {e}")


@router.post("/{order_id}/invoice", response_model=Invoice, status_code=201)
def create_order_invoice(order_id: str, store: EntityStore = Depends(get_store)):
    try:
        return generate_invoice(
            store,
            order_id,
            single_invoice_per_order=settings.single_invoice_per_order,
            due_days=settings.invoice_due_days,
        )
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except (BrickNotFoundError, InvoiceAmountError) as e:
        raise HTTPException(status_code=400, detail=f"Cannot price order: {e}")
    except InvoiceAlreadyExistsError as e:
        raise HTTPException(status_code=400, detail=str(e))
