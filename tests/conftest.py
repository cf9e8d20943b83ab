"""Shared fixtures: fake SBOM/advisory backends served through httpx.MockTransport."""

import logging
import os
import tempfile
from collections.abc import AsyncGenerator, Callable

import httpx
import pytest

# setup_logging() runs on import of server.api_server and writes <ROOT_DIR>/logs
os.environ.setdefault("ROOT_DIR", tempfile.mkdtemp(prefix="sbom-search-bridge-"))

from shared.helper.HelperConfig import HelperConfig  # noqa: E402
from shared.clients.advisory.vexination.AdvisoryClientVexination import AdvisoryClientVexination  # noqa: E402
from shared.clients.sbom.bombastic.SbomClientBombastic import SbomClientBombastic  # noqa: E402

SBOM_BASE_URL = "http://bombastic.test"
ADVISORY_BASE_URL = "http://vexination.test"


def sbom_document(sbom_id: str, **overrides) -> dict:
    """Raw SBOM document as the SBOM index returns it."""
    document = {
        "id": sbom_id,
        "purl": f"pkg:maven/org.example/{sbom_id}@1.0.0",
        "name": sbom_id,
        "cpe": None,
        "version": "1.0.0",
        "sha256": "0" * 64,
        "license": "Apache-2.0",
        "snippet": "",
        "classifier": "library",
        "supplier": "Organization: Example Corp",
        "description": f"Description of {sbom_id}",
        "dependencies": ["pkg:maven/org.example/dep@2.0.0"],
        "created": "2024-01-15T10:00:00Z",
    }
    document.update(overrides)
    return document


def search_body(documents: list[dict], total: int | None = None, metadata: list | None = None) -> dict:
    """Raw search response body wrapping documents into hits."""
    hits = []
    for i, document in enumerate(documents):
        hit = {"document": document, "score": 1.0}
        if metadata is not None:
            hit["metadata"] = metadata[i]
        hits.append(hit)
    return {"total": len(documents) if total is None else total, "result": hits}


class FakeBackend:
    """Records every request and answers it with the configured handler."""

    def __init__(self, handler: Callable | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = handler or (lambda request: httpx.Response(200, json=search_body([])))

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if hasattr(response, "__await__"):
            response = await response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def queries(self) -> list[str]:
        return [request.url.params.get("q") for request in self.requests]


@pytest.fixture
def helper_config(monkeypatch: pytest.MonkeyPatch) -> HelperConfig:
    monkeypatch.setenv("SBOM_BOMBASTIC_BASE_URL", SBOM_BASE_URL)
    monkeypatch.setenv("ADVISORY_VEXINATION_BASE_URL", ADVISORY_BASE_URL)
    for key in ("SBOM_ENGINE", "ADVISORY_ENGINE", "ENRICHMENT_ENABLED", "ENRICHMENT_CONCURRENCY", "ENRICHMENT_ADVISORY_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def sbom_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def advisory_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def sbom_client(helper_config: HelperConfig, sbom_backend: FakeBackend) -> AsyncGenerator[SbomClientBombastic, None]:
    client = SbomClientBombastic(helper_config=helper_config)
    await client.boot(transport=sbom_backend.transport)
    yield client
    await client.close()


@pytest.fixture
async def advisory_client(
    helper_config: HelperConfig, advisory_backend: FakeBackend
) -> AsyncGenerator[AdvisoryClientVexination, None]:
    client = AdvisoryClientVexination(helper_config=helper_config)
    await client.boot(transport=advisory_backend.transport)
    yield client
    await client.close()
