from abc import abstractmethod
from json import JSONDecodeError
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from shared.clients.BackendError import BackendError
from shared.clients.ClientInterface import ClientInterface
from shared.clients.search.models.Search import SearchHit, SearchOptions, SearchResult
from shared.helper.HelperConfig import HelperConfig
from shared.models.credential import Credential

D = TypeVar("D", bound=BaseModel)


class SearchClientInterface(ClientInterface, Generic[D]):
    """Client for a backend exposing a paginated full-text search over one document type."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_search(self) -> str:
        """
        Returns the endpoint path for search requests.

        Returns:
            str: The endpoint path for search requests (e.g. "/api/v1/sbom/search")
        """
        pass

    ################ MODELS ##################
    @abstractmethod
    def _get_document_model(self) -> type[D]:
        """
        Returns the pydantic model each hit's document is parsed into.
        """
        pass

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_search_params(self, query: str, offset: int, limit: int | None, options: SearchOptions) -> dict:
        """
        Builds the query parameters of a search request.

        Args:
            query (str): The free-text query.
            offset (int): Index of the first hit to return.
            limit (int | None): Maximum number of hits. None leaves the page size to the backend.
            options (SearchOptions): Explain/metadata/summaries toggles.

        Returns:
            dict: The query parameters.
        """
        params = {"q": query, "offset": offset}
        if limit is not None:
            params["limit"] = limit
        params.update(options.as_params())
        return params

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def parse_search_response(self, raw_response: object) -> SearchResult[SearchHit[D]]:
        """
        Parses the raw JSON body of a search response.

        Raises:
            BackendError: If the body does not have the expected shape.
        """
        model = SearchResult[SearchHit[self._get_document_model()]]
        try:
            return model.model_validate(raw_response)
        except ValidationError as e:
            raise BackendError(
                f"Malformed search response from {self.get_engine_name()}: {e.error_count()} validation error(s)",
                engine=self.get_engine_name(),
            ) from e

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_search(
        self,
        query: str,
        offset: int,
        limit: int | None,
        options: SearchOptions,
        credential: Credential | None,
    ) -> SearchResult[SearchHit[D]]:
        """Run a single search request against the backend.

        Args:
            query (str): The free-text query.
            offset (int): Index of the first hit to return.
            limit (int | None): Maximum number of hits, None for the backend default.
            options (SearchOptions): Explain/metadata/summaries toggles.
            credential (Credential | None): Caller credential, forwarded unchanged.

        Returns:
            SearchResult[SearchHit[D]]: The page of hits and the backend's total.

        Raises:
            BackendError: On network, auth or parse failures.
        """
        resp = await self.do_request(
            method="GET",
            params=self.get_search_params(query, offset, limit, options),
            endpoint=self._get_endpoint_search(),
            credential=credential,
        )
        try:
            raw_response = resp.json()
        except (JSONDecodeError, UnicodeDecodeError) as e:
            raise BackendError(
                f"Search response from {self.get_engine_name()} is not valid JSON",
                engine=self.get_engine_name(),
                status_code=resp.status_code,
            ) from e
        return self.parse_search_response(raw_response)
