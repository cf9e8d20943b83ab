from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from shared.clients.search.models.Search import SearchResult


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SbomSummary(BaseModel):
    """Public summary of a single SBOM search hit.

    Built once per backend hit by the mapper. ``advisories`` is set once by the
    enrichment step: None means "not computed", an int is the exact number of
    matching advisories.
    """

    id: str
    purl: str | None = None
    name: str
    cpe: str | None = None
    version: str
    sha256: str
    license: str
    snippet: str
    classifier: str
    supplier: str
    href: str
    description: str
    dependencies: list[str] = Field(default_factory=list)
    vulnerabilities: list[str] = Field(default_factory=list)
    advisories: int | None = None
    created: datetime
    metadata: Any = Field(default_factory=dict)

    def advisories_query(self) -> str | None:
        """Derive the advisory index query matching this SBOM.

        Product SBOMs are identified by CPE, which advisories list as fixed
        products; component SBOMs by purl, which advisories list as affected.
        Both terms are OR-ed when present.

        Returns:
            str | None: The query, or None if the SBOM has neither a CPE nor a purl.
        """
        terms = []
        if self.cpe:
            terms.append(f"fixed:{_quote(self.cpe)}")
        if self.purl:
            terms.append(f"affected:{_quote(self.purl)}")
        if not terms:
            return None
        return " OR ".join(terms)


SearchResultSbom = SearchResult[SbomSummary]


class Severity(str, Enum):
    """Advisory severity buckets, ordered from least to most severe."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SummaryEntry(BaseModel):
    severity: Severity
    count: int


class SbomVulnerabilitySummary(BaseModel):
    """Advisory counts per severity for one SBOM. ``summary`` is None if any bucket lookup failed."""

    sbom_id: str
    summary: list[SummaryEntry] | None = None
