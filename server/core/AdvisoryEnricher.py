"""Advisory enrichment.

For every SBOM summary of a result page, derives an advisory query, counts the
matching advisories in the advisory index and attaches the count to the summary.
Enrichment is best effort: a failed lookup only affects its own item.
"""

import asyncio

from pydantic import BaseModel, ConfigDict

from shared.clients.BackendError import BackendError, SecondaryBackendError
from shared.clients.advisory.AdvisoryClientInterface import AdvisoryClientInterface
from shared.clients.search.models.Search import SearchOptions
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential
from server.models.responses import SbomSummary

DEFAULT_CONCURRENCY = 5         # max parallel advisory lookups per request
DEFAULT_ADVISORY_LIMIT = 100000 # only the total is consumed, ask for an exhaustive count
COUNT_OPTIONS = SearchOptions(explain=False, metadata=False, summaries=False)


class AdvisoryCountOutcome(BaseModel):
    """Result of the advisory lookup for one summary.

    Attributes:
        index:  Position of the summary in the result page.
        query:  The derived advisory query, None if none could be derived.
        count:  Number of matching advisories, None if not computed.
        error:  The lookup failure, if any.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    index: int
    query: str | None = None
    count: int | None = None
    error: SecondaryBackendError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class AdvisoryEnricher:
    """Attaches advisory counts to SBOM summaries with bounded concurrency."""

    def __init__(self, helper_config: HelperConfig, advisory_client: AdvisoryClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._advisory_client = advisory_client
        self.enabled = helper_config.get_bool_val("ENRICHMENT_ENABLED", default=True)
        self.concurrency = helper_config.get_int_val("ENRICHMENT_CONCURRENCY", default=DEFAULT_CONCURRENCY, minimum=1)
        self.advisory_limit = helper_config.get_int_val("ENRICHMENT_ADVISORY_LIMIT", default=DEFAULT_ADVISORY_LIMIT, minimum=1)

    ##########################################
    ############### CORE #####################
    ##########################################

    async def do_count(self, query: str, credential: Credential | None) -> int:
        """Count the advisories matching a query.

        Args:
            query (str): The advisory index query.
            credential (Credential | None): Caller credential, forwarded unchanged.

        Returns:
            int: The backend's total for the query.

        Raises:
            SecondaryBackendError: If the advisory backend call failed.
        """
        try:
            result = await self._advisory_client.search_advisories(
                query, 0, self.advisory_limit, COUNT_OPTIONS, credential
            )
        except BackendError as e:
            raise SecondaryBackendError.from_error(e) from e
        return result.total if result.total is not None else len(result.result)

    async def do_enrich(self, summaries: list[SbomSummary], credential: Credential | None) -> list[AdvisoryCountOutcome]:
        """Look up and attach the advisory count of every summary.

        Lookups run concurrently, at most ``concurrency`` at a time. Each outcome
        lands in the slot of its summary, so order is preserved. Cancelling the
        caller cancels all in-flight lookups.

        Args:
            summaries (list[SbomSummary]): The mapped result page. Only ``advisories`` is modified.
            credential (Credential | None): Caller credential, forwarded unchanged.

        Returns:
            list[AdvisoryCountOutcome]: One outcome per summary, in order.
        """
        if not self.enabled:
            self.logging.debug("Advisory enrichment disabled, skipping %d summaries.", len(summaries))
            return [AdvisoryCountOutcome(index=i) for i in range(len(summaries))]

        outcomes: list[AdvisoryCountOutcome | None] = [None] * len(summaries)
        sem = asyncio.Semaphore(self.concurrency)

        async def lookup(index: int, summary: SbomSummary) -> None:
            outcomes[index] = await self._lookup(index, summary, credential, sem)

        await asyncio.gather(*[lookup(i, summary) for i, summary in enumerate(summaries)])

        self.apply_outcomes(summaries, outcomes)
        failed = sum(1 for outcome in outcomes if outcome.failed)
        if failed:
            self.logging.warning("Advisory enrichment: %d of %d lookups failed.", failed, len(summaries))
        return outcomes

    @staticmethod
    def apply_outcomes(summaries: list[SbomSummary], outcomes: list[AdvisoryCountOutcome]) -> None:
        """Write each outcome's count into its summary. Failed lookups become None."""
        for outcome in outcomes:
            summaries[outcome.index].advisories = None if outcome.failed else outcome.count

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _lookup(
        self,
        index: int,
        summary: SbomSummary,
        credential: Credential | None,
        sem: asyncio.Semaphore,
    ) -> AdvisoryCountOutcome:
        query = summary.advisories_query()
        if query is None:
            self.logging.debug("No advisory query derivable for SBOM id=%s.", summary.id)
            return AdvisoryCountOutcome(index=index)

        async with sem:
            try:
                count = await self.do_count(query, credential)
            except SecondaryBackendError as e:
                self.logging.warning("Advisory lookup failed for SBOM id=%s: %s", summary.id, e)
                return AdvisoryCountOutcome(index=index, query=query, error=e)

        self.logging.debug("SBOM id=%s has %d advisories.", summary.id, count)
        return AdvisoryCountOutcome(index=index, query=query, count=count)
