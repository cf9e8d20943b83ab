from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.Search import SearchHit, SearchOptions, SearchResult
from shared.clients.advisory.models.AdvisoryDocument import AdvisoryDocument
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential


class AdvisoryClientInterface(SearchClientInterface[AdvisoryDocument]):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "advisory"
        """
        return "advisory"

    ################ MODELS ##################
    def _get_document_model(self) -> type[AdvisoryDocument]:
        return AdvisoryDocument

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def search_advisories(
        self,
        query: str,
        offset: int,
        limit: int | None,
        options: SearchOptions,
        credential: Credential | None,
    ) -> SearchResult[SearchHit[AdvisoryDocument]]:
        """Search the advisory index.

        Args:
            query (str): The free-text query.
            offset (int): Index of the first hit to return.
            limit (int | None): Page size, None for the backend default.
            options (SearchOptions): Explain/metadata/summaries toggles.
            credential (Credential | None): Caller credential, forwarded unchanged.

        Returns:
            SearchResult[SearchHit[AdvisoryDocument]]: The page of advisory hits with the backend's total.

        Raises:
            BackendError: On network, auth or parse failures.
        """
        return await self.do_search(query, offset, limit, options, credential)
