from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator
from statsapi import __version__
from statsapi.api.router import api_router
from statsapi.core.config import settings
from statsapi.core.logger import get_logger
from statsapi.startup import initialize_application

logger = get_logger("statsapi.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_application()
    try:
        yield
    finally:
        logger.info("statsapi_stopping")


app = FastAPI(
    title="Function Statistics API", version=__version__, lifespan=lifespan
)


@app.get("/metrics")
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/docs", "/openapi.json", "/metrics"],
)

instrumentator.instrument(app)

app.include_router(api_router, prefix="/v1")


def run():  # pragma: no cover - process entrypoint
    uvicorn.run(
        "statsapi.main:app",
        host=settings.stats_listen_host,
        port=settings.stats_listen_port,
    )
