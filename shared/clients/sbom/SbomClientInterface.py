from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.Search import SearchHit, SearchOptions, SearchResult
from shared.clients.sbom.models.SbomDocument import SbomDocument
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential


class SbomClientInterface(SearchClientInterface[SbomDocument]):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "sbom"
        """
        return "sbom"

    ################ MODELS ##################
    def _get_document_model(self) -> type[SbomDocument]:
        return SbomDocument

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def search_sbom(
        self,
        query: str,
        offset: int,
        limit: int | None,
        options: SearchOptions,
        credential: Credential | None,
    ) -> SearchResult[SearchHit[SbomDocument]]:
        """Search the SBOM index.

        Args:
            query (str): The free-text query.
            offset (int): Index of the first hit to return.
            limit (int | None): Page size, None for the backend default.
            options (SearchOptions): Explain/metadata/summaries toggles.
            credential (Credential | None): Caller credential, forwarded unchanged.

        Returns:
            SearchResult[SearchHit[SbomDocument]]: The page of SBOM hits with the backend's total.

        Raises:
            BackendError: On network, auth or parse failures.
        """
        self.logging.debug("Querying SBOM index '%s' using '%s' (offset=%d, limit=%s)", self.get_engine_name(), query, offset, limit)
        return await self.do_search(query, offset, limit, options, credential)
