import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import AppConfig, get_config
from .csv_output import ensure_output_dir
from .logging_config import setup_logging
from .models import ErrorResponse, GenerateCsvResponse, HealthResponse
from .pipeline import failure_response, generate_csv

logger = logging.getLogger(__name__)


def build_http_client(
    config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.fetch.timeout_seconds),
        follow_redirects=True,
        headers={"Accept": "application/json", "User-Agent": "csv-aggregator/0.1.0"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_config()
    setup_logging(config.log_level)
    ensure_output_dir(config.output_dir)
    app.state.http_client = build_http_client(config)
    logger.info(
        f"Server running at http://{config.server.host}:{config.server.port}"
    )
    try:
        yield
    finally:
        await app.state.http_client.aclose()


app = FastAPI(
    title="csv-aggregator",
    description="Joins users, posts and comments into a spreadsheet-safe CSV file",
    version="0.1.0",
    lifespan=lifespan,
)


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get(
    "/generate-csv",
    response_model=GenerateCsvResponse,
    responses={500: {"model": ErrorResponse}},
)
async def generate_csv_file(
    config: AppConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        return await generate_csv(client, config)
    except Exception as exc:
        logger.exception("Error in /generate-csv")
        status_code, body = failure_response(exc, development=config.is_development)
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(exclude_none=True),
        )


def main():
    """Run the API server."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "app.main:app",
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
