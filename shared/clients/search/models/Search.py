"""Generic search envelope shared by all search backends and the public API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class SearchOptions(BaseModel):
    """
    Per-request toggles forwarded unchanged to the search backend.

    Attributes:
        explain (bool): Include the scoring rationale of each hit.
        metadata (bool): Include the per-item metadata blob.
        summaries (bool): Include aggregate summaries.
    """

    model_config = ConfigDict(frozen=True)

    explain: bool = False
    metadata: bool = False
    summaries: bool = False

    def as_params(self) -> dict[str, str]:
        return {
            "explain": str(self.explain).lower(),
            "metadata": str(self.metadata).lower(),
            "summaries": str(self.summaries).lower(),
        }


class SearchHit(BaseModel, Generic[T]):
    """A single backend hit: the indexed document plus optional scoring data."""

    document: T
    score: float | None = None
    explanation: Any | None = None
    metadata: Any | None = None


class SearchResult(BaseModel, Generic[T]):
    """
    A page of search results.

    Attributes:
        total (int | None): Total number of matches reported by the backend, independent of the page size.
        result (list[T]): The items of the requested page, in backend order.
    """

    total: int | None = None
    result: list[T] = Field(default_factory=list)
