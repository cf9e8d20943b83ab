"""Advisory document as indexed by the advisory search backend."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdvisoryDocument(BaseModel):
    """
    Represents a single indexed security advisory. Only the hit count is
    consumed by the enrichment, so unknown fields are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    advisory_id: str = ""
    advisory_title: str = ""
    advisory_date: datetime | None = None
    advisory_severity: str | None = None
    cves: list[str] = Field(default_factory=list)
