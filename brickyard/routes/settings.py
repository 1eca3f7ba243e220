from typing import List

import structlog
from fastapi import APIRouter, Depends

from ..db import get_store
from ..schemas.settings import Setting, SettingIn
from ..storage.provider import EntityStore


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=List[Setting])
def list_settings(store: EntityStore = Depends(get_store)):
    return store.settings.list()


@router.put("", response_model=List[Setting])
def update_settings(payload: List[SettingIn], store: EntityStore = Depends(get_store)):
    result = store.settings.update_settings(payload)
    logger.info("settings_updated", keys=[item.key for item in payload])
    return result
