"""Per-SBOM advisory counts bucketed by severity.

Counts come from the advisory index: for every SBOM of a search page, one
count query per severity bucket, restricted to the SBOM's advisory query.
"""

import asyncio

from shared.clients.BackendError import SecondaryBackendError
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential
from shared.clients.search.models.Search import SearchOptions
from server.core.AdvisoryEnricher import AdvisoryEnricher
from server.core.SbomSearchService import SbomSearchService
from server.core.SbomSummaryMapper import map_sbom_hits
from server.models.requests import SbomSearchParams
from server.models.responses import SbomSummary, SbomVulnerabilitySummary, Severity, SummaryEntry


def severity_query(advisories_query: str, severity: Severity) -> str:
    return f"({advisories_query}) AND severity:{severity.value}"


class VulnerabilitySummaryService:
    """Builds severity histograms for the SBOMs matching a search."""

    def __init__(
        self,
        helper_config: HelperConfig,
        search_service: SbomSearchService,
        enricher: AdvisoryEnricher,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._search_service = search_service
        self._enricher = enricher

    async def summarize(
        self,
        params: SbomSearchParams,
        credential: Credential | None,
    ) -> list[SbomVulnerabilitySummary]:
        """Search SBOMs and count their advisories per severity.

        Args:
            params (SbomSearchParams): Query text and pagination of the SBOM search.
            credential (Credential | None): Caller credential, forwarded to both backends.

        Returns:
            list[SbomVulnerabilitySummary]: One entry per SBOM, in search order.

        Raises:
            PrimaryBackendError: If the SBOM search failed.
        """
        primary = await self._search_service.do_primary_search(params, SearchOptions(), credential)
        summaries = map_sbom_hits(primary.result)

        sem = asyncio.Semaphore(self._enricher.concurrency)
        results = await asyncio.gather(*[self._summarize_one(summary, credential, sem) for summary in summaries])
        self.logging.info("VulnerabilitySummaryService.summarize: %d SBOM(s) summarized for q='%s'.", len(results), params.q)
        return list(results)

    async def _summarize_one(
        self,
        summary: SbomSummary,
        credential: Credential | None,
        sem: asyncio.Semaphore,
    ) -> SbomVulnerabilitySummary:
        query = summary.advisories_query()
        if query is None:
            return SbomVulnerabilitySummary(sbom_id=summary.id)

        async def count(severity: Severity) -> int:
            async with sem:
                return await self._enricher.do_count(severity_query(query, severity), credential)

        counts = await asyncio.gather(*[count(severity) for severity in Severity], return_exceptions=True)
        for result in counts:
            if isinstance(result, SecondaryBackendError):
                self.logging.warning("Severity summary failed for SBOM id=%s: %s", summary.id, result)
                return SbomVulnerabilitySummary(sbom_id=summary.id)
            if isinstance(result, BaseException):
                raise result

        return SbomVulnerabilitySummary(
            sbom_id=summary.id,
            summary=[SummaryEntry(severity=severity, count=n) for severity, n in zip(Severity, counts)],
        )
