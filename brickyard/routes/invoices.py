from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from ..db import get_store
from ..schemas.invoices import Invoice, InvoiceCreate, InvoicePatch
from ..storage.provider import EntityStore


router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("", response_model=List[Invoice])
def list_invoices(store: EntityStore = Depends(get_store)):
    return store.invoices.list()


@router.get("/order/{order_id}", response_model=Invoice)
def get_invoice_for_order(order_id: str, store: EntityStore = Depends(get_store)):
    invoice = store.invoices.get_by_order_id(order_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get("/{invoice_id}", response_model=Invoice)
def get_invoice(invoice_id: str, store: EntityStore = Depends(get_store)):
    invoice = store.invoices.get(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post("", response_model=Invoice, status_code=201)
def create_invoice(payload: InvoiceCreate, store: EntityStore = Depends(get_store)):
    with store.transaction():
        if settings.single_invoice_per_order and store.invoices.get_by_order_id(payload.order_id):
            raise HTTPException(status_code=400, detail=f"Order {payload.order_id} already has an invoice")
        return store.invoices.create(payload)


@router.put("/{invoice_id}", response_model=Invoice)
def update_invoice(invoice_id: str, payload: InvoicePatch, store: EntityStore = Depends(get_store)):
    invoice = store.invoices.update(invoice_id, payload)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(invoice_id: str, store: EntityStore = Depends(get_store)):
    if not store.invoices.delete(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    return Response(status_code=204)
