from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..db import get_store
from ..schemas.bricks import Brick, BrickCreate, BrickPatch, StockUpdate
from ..storage.provider import EntityStore


router = APIRouter(prefix="/api/bricks", tags=["bricks"])


@router.get("", response_model=List[Brick])
def list_bricks(store: EntityStore = Depends(get_store)):
    return store.bricks.list()


@router.get("/{brick_id}", response_model=Brick)
def get_brick(brick_id: str, store: EntityStore = Depends(get_store)):
    brick = store.bricks.get(brick_id)
    if not brick:
        raise HTTPException(status_code=404, detail="Brick not found")
    return brick


@router.post("", response_model=Brick, status_code=201)
def create_brick(payload: BrickCreate, store: EntityStore = Depends(get_store)):
    return store.bricks.create(payload)


@router.put("/{brick_id}", response_model=Brick)
def update_brick(brick_id: str, payload: BrickPatch, store: EntityStore = Depends(get_store)):
    brick = store.bricks.update(brick_id, payload)
    if not brick:
        raise HTTPException(status_code=404, detail="Brick not found")
    return brick


@router.put("/{brick_id}/stock", response_model=Brick)
def update_brick_stock(brick_id: str, payload: StockUpdate, store: EntityStore = Depends(get_store)):
    brick = store.bricks.update_stock(brick_id, payload.current_stock)
    if not brick:
        raise HTTPException(status_code=404, detail="Brick not found")
    return brick


@router.delete("/{brick_id}", status_code=204)
def delete_brick(brick_id: str, store: EntityStore = Depends(get_store)):
    # Orders keep pointing at a deleted brick; nothing cascades
    if not store.bricks.delete(brick_id):
        raise HTTPException(status_code=404, detail="Brick not found")
    return Response(status_code=204)
