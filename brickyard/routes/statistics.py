from fastapi import APIRouter, Depends

from ..db import get_store
from ..schemas.statistics import Statistics
from ..services.statistics import compute_statistics
from ..storage.provider import EntityStore


router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.get("", response_model=Statistics)
def get_statistics(store: EntityStore = Depends(get_store)):
    return compute_statistics(store)
