from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface

# default engine per client type
_DEFAULT_ENGINES: dict[str, str] = {
    "sbom": "bombastic",
    "advisory": "vexination",
}

# class name prefix per client type, e.g. SbomClientBombastic
_CLASS_PREFIXES: dict[str, str] = {
    "sbom": "SbomClient",
    "advisory": "AdvisoryClient",
}


class SearchClientManager:
    """Manager class to instantiate the configured search client of one type ("sbom" or "advisory")."""

    def __init__(self, helper_config: HelperConfig, client_type: str):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client_type = client_type.strip().lower()
        if self.client_type not in _CLASS_PREFIXES:
            raise ValueError(f"Unknown search client type '{client_type}'. Expected one of {sorted(_CLASS_PREFIXES)}.")
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the engine name for this client type from env configuration (e.g. SBOM_ENGINE).

        Returns:
            str: Capitalised engine name (e.g. "Bombastic").
        """
        engine = self.helper_config.get_string_val(
            f"{self.client_type.upper()}_ENGINE",
            default=_DEFAULT_ENGINES[self.client_type],
        )
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> SearchClientInterface:
        """Instantiate the search client for the configured engine.

        Returns:
            SearchClientInterface: The instantiated client.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"{_CLASS_PREFIXES[self.client_type]}{engine}"
        try:
            module = __import__(
                f"shared.clients.{self.client_type}.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported {self.client_type.upper()} engine '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated %s client for engine: %s", self.client_type.upper(), engine)
        return client

    def get_client(self) -> SearchClientInterface:
        """Return the instantiated search client."""
        return self.client
