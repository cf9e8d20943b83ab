from shared.clients.BackendError import BackendError, PrimaryBackendError
from shared.clients.sbom.SbomClientInterface import SbomClientInterface
from shared.clients.sbom.models.SbomDocument import SbomDocument
from shared.clients.search.models.Search import SearchHit, SearchOptions, SearchResult
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential
from server.core.AdvisoryEnricher import AdvisoryEnricher
from server.core.SbomSummaryMapper import map_sbom_hits
from server.models.requests import SbomSearchParams
from server.models.responses import SbomSummary


class SbomSearchService:
    """Handles SBOM searches: search -> map -> enrich -> assemble."""

    def __init__(
        self,
        helper_config: HelperConfig,
        sbom_client: SbomClientInterface,
        enricher: AdvisoryEnricher,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._sbom_client = sbom_client
        self._enricher = enricher

    ##########################################
    ############### CORE #####################
    ##########################################

    async def search(
        self,
        params: SbomSearchParams,
        options: SearchOptions,
        credential: Credential | None,
    ) -> SearchResult[SbomSummary]:
        """Search SBOMs and attach the advisory count to each result.

        Args:
            params (SbomSearchParams): Query text and pagination.
            options (SearchOptions): Explain/metadata/summaries toggles.
            credential (Credential | None): Caller credential, forwarded to both backends.

        Returns:
            SearchResult[SbomSummary]: The enriched page with the SBOM backend's total.

        Raises:
            PrimaryBackendError: If the SBOM search failed. Advisory failures never raise.
        """
        self.logging.info(
            "SbomSearchService.search: q='%s', offset=%d, limit=%s",
            params.q, params.offset, params.limit,
        )

        primary = await self.do_primary_search(params, options, credential)
        summaries = map_sbom_hits(primary.result)
        await self._enricher.do_enrich(summaries, credential)

        self.logging.info(
            "SbomSearchService.search: returning %d of %s result(s).",
            len(summaries), primary.total,
        )
        return self.assemble(primary.total, summaries)

    async def do_primary_search(
        self,
        params: SbomSearchParams,
        options: SearchOptions,
        credential: Credential | None,
    ) -> SearchResult[SearchHit[SbomDocument]]:
        """Run the SBOM search and cap the page at the requested limit.

        Raises:
            PrimaryBackendError: If the SBOM backend call failed.
        """
        try:
            result = await self._sbom_client.search_sbom(
                params.q, params.offset, params.limit, options, credential
            )
        except BackendError as e:
            self.logging.error("SBOM search for q='%s' failed: %s", params.q, e)
            raise PrimaryBackendError.from_error(e) from e

        if params.limit is not None and len(result.result) > params.limit:
            self.logging.warning(
                "SBOM backend returned %d hits for limit %d, truncating.",
                len(result.result), params.limit,
            )
            result = SearchResult[SearchHit[SbomDocument]](total=result.total, result=result.result[:params.limit])
        return result

    @staticmethod
    def assemble(total: int | None, summaries: list[SbomSummary]) -> SearchResult[SbomSummary]:
        """Wrap the enriched page; ``total`` is taken from the SBOM backend, never recomputed."""
        return SearchResult[SbomSummary](total=total, result=summaries)
