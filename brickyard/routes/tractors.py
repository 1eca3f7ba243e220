from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..db import get_store
from ..schemas.tractors import Tractor, TractorCreate, TractorPatch
from ..storage.provider import DuplicateKeyError, EntityStore


router = APIRouter(prefix="/api/tractors", tags=["tractors"])


@router.get("", response_model=List[Tractor])
def list_tractors(store: EntityStore = Depends(get_store)):
    return store.tractors.list()


@router.get("/available", response_model=List[Tractor])
def list_available_tractors(store: EntityStore = Depends(get_store)):
    return store.tractors.list_available()


@router.get("/{tractor_id}", response_model=Tractor)
def get_tractor(tractor_id: str, store: EntityStore = Depends(get_store)):
    tractor = store.tractors.get(tractor_id)
    if not tractor:
        raise HTTPException(status_code=404, detail="Tractor not found")
    return tractor


@router.post("", response_model=Tractor, status_code=201)
def create_tractor(payload: TractorCreate, store: EntityStore = Depends(get_store)):
    try:
        return store.tractors.create(payload)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{tractor_id}", response_model=Tractor)
def update_tractor(tractor_id: str, payload: TractorPatch, store: EntityStore = Depends(get_store)):
    try:
        tractor = store.tractors.update(tractor_id, payload)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not tractor:
        raise HTTPException(status_code=404, detail="Tractor not found")
    return tractor


@router.delete("/{tractor_id}", status_code=204)
def delete_tractor(tractor_id: str, store: EntityStore = Depends(get_store)):
    if not store.tractors.delete(tractor_id):
        raise HTTPException(status_code=404, detail="Tractor not found")
    return Response(status_code=204)
