from fastapi import APIRouter, Depends, Response
from statsapi.api.dependencies import get_prometheus_client
from statsapi.infrastructure.prometheus.client import PrometheusClient
from statsapi.utils.concurrency import run_blocking

router = APIRouter()


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(client: PrometheusClient = Depends(get_prometheus_client)):
    if await run_blocking(client.ready):
        return {"status": "ready", "prometheus": client.base_url}
    return Response(status_code=503, content="prometheus not ready")
