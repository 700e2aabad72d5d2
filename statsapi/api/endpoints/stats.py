from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response
from statsapi.api.dependencies import get_stats_service
from statsapi.services.response import render
from statsapi.services.stats_service import StatsService

router = APIRouter()

STARTTIME = Query(None, description="RFC 3339 start, defaults to endtime - 5m")
ENDTIME = Query(None, description="RFC 3339 end, defaults to now")
STEP = Query(None, description="Sampling step such as 30s, defaults to 30s")


def _json(payload: Dict[str, Any]) -> Response:
    # Errors are part of the body contract, the HTTP status stays 200.
    return Response(content=render(payload), media_type="application/json")


@router.get("/stats", summary="Statistics for all applications")
@router.get("/statistics", include_in_schema=False)
async def global_statistics(
    starttime: Optional[str] = STARTTIME,
    endtime: Optional[str] = ENDTIME,
    step: Optional[str] = STEP,
    svc: StatsService = Depends(get_stats_service),
):
    return _json(await svc.get_statistics(starttime, endtime, step))


@router.get("/apps/{app_name}/stats", summary="Statistics for one application")
@router.get("/apps/{app_name}/statistics", include_in_schema=False)
async def app_statistics(
    app_name: str,
    starttime: Optional[str] = STARTTIME,
    endtime: Optional[str] = ENDTIME,
    step: Optional[str] = STEP,
    svc: StatsService = Depends(get_stats_service),
):
    return _json(
        await svc.get_statistics(starttime, endtime, step, app_name=app_name)
    )


@router.get(
    "/apps/{app_name}/routes/{route_path:path}/stats",
    summary="Statistics for one route of an application",
)
@router.get(
    "/apps/{app_name}/routes/{route_path:path}/statistics", include_in_schema=False
)
async def route_statistics(
    app_name: str,
    route_path: str,
    starttime: Optional[str] = STARTTIME,
    endtime: Optional[str] = ENDTIME,
    step: Optional[str] = STEP,
    svc: StatsService = Depends(get_stats_service),
):
    return _json(
        await svc.get_statistics(
            starttime, endtime, step, app_name=app_name, route_name=route_path
        )
    )
