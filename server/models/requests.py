from pydantic import BaseModel, ConfigDict, Field


class SbomSearchParams(BaseModel):
    """
    Query parameters of an SBOM search.

    Attributes:
        q (str): Free-text query, passed to the SBOM index as-is.
        offset (int): Index of the first result.
        limit (int | None): Page size. None leaves it to the backend.
    """

    model_config = ConfigDict(frozen=True)

    q: str
    offset: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=0)
