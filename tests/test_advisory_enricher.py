"""Tests for the per-item, best-effort advisory enrichment."""

import asyncio

import httpx
import pytest

from conftest import FakeBackend, sbom_document

from shared.clients.BackendError import SecondaryBackendError
from shared.clients.sbom.models.SbomDocument import SbomDocument
from shared.clients.search.models.Search import SearchHit
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential
from server.core.AdvisoryEnricher import AdvisoryEnricher
from server.core.SbomSummaryMapper import map_sbom_hit
from server.models.responses import SbomSummary


def summary(sbom_id: str, **overrides) -> SbomSummary:
    return map_sbom_hit(SearchHit[SbomDocument](document=SbomDocument(**sbom_document(sbom_id, **overrides))))


def purl_of(sbom_id: str) -> str:
    return f'affected:"pkg:maven/org.example/{sbom_id}@1.0.0"'


def totals_by_query(totals: dict[str, int | None]):
    """Handler answering each advisory query with its total, or 500 when the total is None."""

    def handler(request: httpx.Request) -> httpx.Response:
        total = totals[request.url.params["q"]]
        if total is None:
            return httpx.Response(500, text="index unavailable")
        return httpx.Response(200, json={"total": total, "result": []})

    return handler


@pytest.fixture
def enricher(helper_config: HelperConfig, advisory_client) -> AdvisoryEnricher:
    return AdvisoryEnricher(helper_config=helper_config, advisory_client=advisory_client)


class TestEnrichment:
    async def test_success_and_failure_are_isolated(self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend) -> None:
        advisory_backend.handler = totals_by_query({purl_of("a"): 7, purl_of("b"): None})
        summaries = [summary("a"), summary("b")]

        outcomes = await enricher.do_enrich(summaries, None)

        assert summaries[0].advisories == 7
        assert summaries[1].advisories is None
        assert outcomes[0].count == 7 and not outcomes[0].failed
        assert outcomes[1].failed
        assert isinstance(outcomes[1].error, SecondaryBackendError)
        assert outcomes[1].error.status_code == 500

    async def test_all_lookups_failing_leaves_every_count_unset(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        advisory_backend.handler = handler
        summaries = [summary(sbom_id) for sbom_id in ("a", "b", "c")]

        outcomes = await enricher.do_enrich(summaries, None)

        assert [s.advisories for s in summaries] == [None, None, None]
        assert all(outcome.failed for outcome in outcomes)

    async def test_unencodable_identifier_fails_only_its_own_item(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        advisory_backend.handler = lambda request: httpx.Response(200, json={"total": 4, "result": []})
        summaries = [summary("a"), summary("b", purl="pkg:npm/\ud800@1")]

        outcomes = await enricher.do_enrich(summaries, None)

        assert [s.advisories for s in summaries] == [4, None]
        assert not outcomes[0].failed
        assert isinstance(outcomes[1].error, SecondaryBackendError)
        assert outcomes[1].error.engine == "vexination"
        assert advisory_backend.queries() == [purl_of("a")]

    async def test_zero_advisories_is_a_count(self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend) -> None:
        advisory_backend.handler = totals_by_query({purl_of("a"): 0})
        summaries = [summary("a")]
        await enricher.do_enrich(summaries, None)
        assert summaries[0].advisories == 0

    async def test_summary_without_identifiers_is_skipped(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        advisory_backend.handler = totals_by_query({purl_of("a"): 2})
        summaries = [summary("x", purl=None, cpe=None), summary("a")]

        outcomes = await enricher.do_enrich(summaries, None)

        assert summaries[0].advisories is None
        assert outcomes[0].query is None and not outcomes[0].failed
        assert summaries[1].advisories == 2
        assert advisory_backend.queries() == [purl_of("a")]

    async def test_count_request_parameters(self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend) -> None:
        advisory_backend.handler = totals_by_query({purl_of("a"): 1})
        await enricher.do_enrich([summary("a")], None)

        params = advisory_backend.requests[0].url.params
        assert params["offset"] == "0"
        assert params["limit"] == "100000"
        assert (params["explain"], params["metadata"], params["summaries"]) == ("false", "false", "false")

    async def test_total_missing_falls_back_to_hit_count(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        advisory_backend.handler = lambda request: httpx.Response(
            200, json={"result": [{"document": {"advisory_id": "A"}}, {"document": {"advisory_id": "B"}}]}
        )
        summaries = [summary("a")]
        await enricher.do_enrich(summaries, None)
        assert summaries[0].advisories == 2

    async def test_credential_is_forwarded(self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend) -> None:
        await enricher.do_enrich([summary("a")], Credential(token="t0k"))
        assert advisory_backend.requests[0].headers["Authorization"] == "Bearer t0k"

    async def test_disabled_enrichment_makes_no_calls(
        self, helper_config: HelperConfig, advisory_client, advisory_backend: FakeBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENRICHMENT_ENABLED", "false")
        enricher = AdvisoryEnricher(helper_config=helper_config, advisory_client=advisory_client)
        summaries = [summary("a")]

        outcomes = await enricher.do_enrich(summaries, None)

        assert advisory_backend.requests == []
        assert summaries[0].advisories is None
        assert len(outcomes) == 1

    async def test_advisory_limit_must_be_positive(
        self, helper_config: HelperConfig, advisory_client, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENRICHMENT_ADVISORY_LIMIT", "0")
        with pytest.raises(ValueError, match=">= 1"):
            AdvisoryEnricher(helper_config=helper_config, advisory_client=advisory_client)


class TestConcurrency:
    async def test_order_is_preserved_when_responses_arrive_out_of_order(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        totals = {purl_of(str(i)): i for i in range(6)}

        async def handler(request: httpx.Request) -> httpx.Response:
            total = totals[request.url.params["q"]]
            # later items answer first
            await asyncio.sleep(0.01 * (6 - total))
            return httpx.Response(200, json={"total": total, "result": []})

        advisory_backend.handler = handler
        summaries = [summary(str(i)) for i in range(6)]

        outcomes = await enricher.do_enrich(summaries, None)

        assert [s.advisories for s in summaries] == [0, 1, 2, 3, 4, 5]
        assert [outcome.index for outcome in outcomes] == [0, 1, 2, 3, 4, 5]

    @pytest.mark.parametrize("limit", [1, 3])
    async def test_in_flight_lookups_are_bounded(
        self,
        helper_config: HelperConfig,
        advisory_client,
        advisory_backend: FakeBackend,
        monkeypatch: pytest.MonkeyPatch,
        limit: int,
    ) -> None:
        monkeypatch.setenv("ENRICHMENT_CONCURRENCY", str(limit))
        enricher = AdvisoryEnricher(helper_config=helper_config, advisory_client=advisory_client)
        in_flight = 0
        peak = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return httpx.Response(200, json={"total": 1, "result": []})

        advisory_backend.handler = handler
        summaries = [summary(str(i)) for i in range(8)]

        await enricher.do_enrich(summaries, None)

        assert peak == limit
        assert [s.advisories for s in summaries] == [1] * 8

    async def test_cancellation_abandons_in_flight_lookups(
        self, enricher: AdvisoryEnricher, advisory_backend: FakeBackend
    ) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json={"total": 1, "result": []})

        advisory_backend.handler = handler
        summaries = [summary("a"), summary("b")]

        task = asyncio.create_task(enricher.do_enrich(summaries, None))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert [s.advisories for s in summaries] == [None, None]
