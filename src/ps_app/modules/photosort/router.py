# src/ps_app/modules/photosort/router.py
from __future__ import annotations

from fastapi import APIRouter

from ps_app.api.deps import SettingsDep
from ps_app.core.errors import to_http

from .schemas import SortRequest, SortResponse
from .service import SortService

router = APIRouter(prefix="/photosort", tags=["photosort"])


@router.post(
    "/plan",
    response_model=SortResponse,
    summary="Plan sorting photos/videos into the target template",
    description="Analyze dates, render target paths and report the planned actions. No files change.",
)
def plan_endpoint(req: SortRequest, settings: SettingsDep):
    try:
        return SortService(settings).plan(req)
    except Exception as err:
        raise to_http(err) from err


@router.post(
    "/apply",
    response_model=SortResponse,
    summary="Sort photos/videos into the target template",
    description="Move/copy/link every supported file to its rendered target path.",
)
def apply_endpoint(req: SortRequest, settings: SettingsDep):
    try:
        return SortService(settings).apply(req)
    except Exception as err:
        raise to_http(err) from err
