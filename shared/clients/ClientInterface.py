from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes

from shared.clients.BackendError import BackendError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.credential import Credential


class ClientInterface(ABC):
    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)

        # one shared AsyncClient per backend, created in boot()
        self._client: httpx.AsyncClient | None = None
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Validates that all required configuration values for the client are set and valid.

        Raises:
            ValueError: If any required configuration value is missing or invalid.
        """
        for config in self._get_required_config():
            _ = self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def is_booted(self) -> bool:
        return self._client is not None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """
        Returns the type of the client in lowercase. E.g. "sbom"
        """
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "sbom"
        """
        pass

    def get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "bombastic"
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "bombastic"
        """
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns all required configurations for the client.

        Returns:
            list[EnvConfig]: A list containing the details of each required configuration key.
        """
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        """
        Returns:
            str: The full configuration key name for the client. E.g. "SBOM_BOMBASTIC_BASE_URL"
        """
        key_prefix = f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}"
        return f"{key_prefix}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Retrieves the value of a configuration key for the client.

        Args:
            raw_key (str): The raw configuration key name
            default (Any): The default value to return if the configuration key is not set
            val_type (str): The type of the configuration value ("string", "number", "bool")
        """
        key = self._get_config_key_name(raw_key)
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        elif val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        elif val_type == "bool":
            return self._helper_config.get_bool_val(key, default=default)
        else:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} client '{self.get_engine_name()}'.")

    ################ AUTH ##################
    def _get_auth_header(self, credential: Credential | None) -> dict:
        """
        Returns the authentication header forwarding the caller's credential, if any.

        Args:
            credential (Credential | None): The caller credential. None for unauthenticated callers.

        Returns:
            dict: A dictionary containing the auth header, empty if there is no credential.
        """
        return credential.as_header() if credential is not None else {}

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the base URL of the client backend server from env variables

        Returns:
            str: The base URL of the client backend server (e.g. "http://localhost:8080")
        """
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns the endpoint path for healthcheck requests.

        Returns:
            str: The endpoint path for healthcheck requests (e.g. "/healthz")
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> bool:
        """Check if the client backend is healthy.

        Returns:
            bool: True if the backend answered the healthcheck with a 2xx status.
        """
        try:
            await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())
        except BackendError as e:
            self.logging.warning("Healthcheck of %s backend '%s' failed: %s", self.get_client_type(), self.get_engine_name(), e)
            return False
        return True

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialise the HTTP client.

        Args:
            transport (httpx.AsyncBaseTransport | None): Optional transport override (e.g. httpx.MockTransport).
        """
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client and any other resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        credential: Credential | None = None,
        additional_headers: dict | None = None,
    ) -> httpx.Response:
        """Send an HTTP request to the client backend.

        No retries are performed here. Every failure is reported as a BackendError.

        Args:
            method: HTTP method (GET, POST, …).
            params: URL query parameters.
            endpoint: Path to append to the base URL (leading slash optional).
            credential: Caller credential to forward, None for unauthenticated callers.
            additional_headers: Extra headers that override the defaults.

        Returns:
            httpx.Response: The successful (2xx) response.

        Raises:
            RuntimeError: If the client was not booted.
            BackendError: On unbuildable requests, transport errors, timeouts and non-2xx responses.
        """
        if self._client is None:
            raise RuntimeError("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""
        url = f"{self._get_base_url().rstrip('/')}{endpoint}"

        headers: dict = {"Accept": "application/json"}
        headers.update(self._get_auth_header(credential))
        if additional_headers:
            headers.update(additional_headers)

        try:
            response = await self._client.request(method, url=url, headers=headers, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise BackendError(
                f"Request to {url} timed out after {self.timeout}s",
                engine=self.get_engine_name(),
                timeout=True,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(
                f"Request to {url} failed: {e.__class__.__name__}: {e}",
                engine=self.get_engine_name(),
            ) from e
        # the request could not be built, e.g. a query value that is not encodable
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            raise BackendError(
                f"Request to {url} could not be built: {e.__class__.__name__}: {e}",
                engine=self.get_engine_name(),
            ) from e

        if not response.is_success:
            self.logging.debug(
                "Request to %s failed with status %d: %s",
                url,
                response.status_code,
                response.text,
            )
            raise BackendError(
                f"Request to {url} failed with status {response.status_code}",
                engine=self.get_engine_name(),
                status_code=response.status_code,
            )

        return response
