"""FastAPI application entry point for the SBOM search bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.BackendError import PrimaryBackendError
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.SearchClientManager import SearchClientManager
from server.core.AdvisoryEnricher import AdvisoryEnricher
from server.core.SbomSearchService import SbomSearchService
from server.core.VulnerabilitySummaryService import VulnerabilitySummaryService
from server.routers.HealthRouter import router as health_router
from server.routers.SbomRouter import router as sbom_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    sbom_client = SearchClientManager(helper_config=app.state.helper_config, client_type="sbom").get_client()
    advisory_client = SearchClientManager(helper_config=app.state.helper_config, client_type="advisory").get_client()
    clients = [sbom_client, advisory_client]

    logging.info("Booting all clients...")
    for client in clients:
        await client.boot()
    logging.info("All clients booted successfully.", color="green")

    try:
        await check_connections(sbom_client, advisory_client)
    except Exception:
        for client in clients:
            await client.close()
        raise

    wire_services(app, sbom_client, advisory_client)

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    for client in clients:
        await client.close()
    logging.info("All clients closed.")


def wire_services(app: FastAPI, sbom_client: SearchClientInterface, advisory_client: SearchClientInterface) -> None:
    """Create the request services on app.state from booted clients."""
    enricher = AdvisoryEnricher(helper_config=app.state.helper_config, advisory_client=advisory_client)
    app.state.sbom_search_service = SbomSearchService(
        helper_config=app.state.helper_config,
        sbom_client=sbom_client,
        enricher=enricher,
    )
    app.state.vulnerability_summary_service = VulnerabilitySummaryService(
        helper_config=app.state.helper_config,
        search_service=app.state.sbom_search_service,
        enricher=enricher,
    )


async def check_connections(sbom_client: SearchClientInterface, advisory_client: SearchClientInterface) -> None:
    """Check connectivity to both search backends on startup.

    The advisory backend is optional: if it is down, searches still succeed
    without advisory counts. The SBOM backend is required.

    Raises:
        RuntimeError: If the SBOM backend is not reachable.
    """
    if not await advisory_client.do_healthcheck():
        logging.warning(
            "Advisory backend '%s' is not reachable. Advisory counts will be missing.",
            advisory_client.get_engine_name(),
        )

    if not await sbom_client.do_healthcheck():
        raise RuntimeError(
            f"SBOM backend '{sbom_client.get_engine_name()}' is not reachable. Cannot serve searches."
        )


def status_for_primary_error(error: PrimaryBackendError) -> int:
    """HTTP status reported to the caller for a failed SBOM search."""
    if error.status_code in (401, 403):
        return error.status_code
    if error.timeout:
        return 504
    return 502


app = FastAPI(
    title="sbom_search_bridge",
    description=(
        "Search SBOMs in the SBOM index and report, for every result, "
        "the number of known security advisories from the advisory index."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(sbom_router)


@app.exception_handler(PrimaryBackendError)
async def primary_backend_error_handler(request: Request, exc: PrimaryBackendError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for_primary_error(exc),
        content={"detail": exc.message, "engine": exc.engine},
    )


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting sbom_search_bridge API Server v%s on port 8000...",
        app_version,
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
