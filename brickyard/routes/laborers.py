from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..db import get_store
from ..schemas.laborers import Laborer, LaborerCreate, LaborerPatch
from ..storage.provider import EntityStore


router = APIRouter(prefix="/api/laborers", tags=["laborers"])


@router.get("", response_model=List[Laborer])
def list_laborers(store: EntityStore = Depends(get_store)):
    return store.laborers.list()


@router.get("/active", response_model=List[Laborer])
def list_active_laborers(store: EntityStore = Depends(get_store)):
    return store.laborers.list_active()


@router.get("/{laborer_id}", response_model=Laborer)
def get_laborer(laborer_id: str, store: EntityStore = Depends(get_store)):
    laborer = store.laborers.get(laborer_id)
    if not laborer:
        raise HTTPException(status_code=404, detail="Laborer not found")
    return laborer


@router.post("", response_model=Laborer, status_code=201)
def create_laborer(payload: LaborerCreate, store: EntityStore = Depends(get_store)):
    return store.laborers.create(payload)


@router.put("/{laborer_id}", response_model=Laborer)
def update_laborer(laborer_id: str, payload: LaborerPatch, store: EntityStore = Depends(get_store)):
    laborer = store.laborers.update(laborer_id, payload)
    if not laborer:
        raise HTTPException(status_code=404, detail="Laborer not found")
    return laborer


@router.delete("/{laborer_id}", status_code=204)
def delete_laborer(laborer_id: str, store: EntityStore = Depends(get_store)):
    if not store.laborers.delete(laborer_id):
        raise HTTPException(status_code=404, detail="Laborer not found")
    return Response(status_code=204)
