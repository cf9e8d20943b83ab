"""SBOM document as indexed by the SBOM search backend."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SbomDocument(BaseModel):
    """
    Represents a single indexed SBOM, as returned by a SBOM search client. Read-only.

    Attributes:
        id:           Backend identifier of the SBOM.
        purl:         Package URL of the described component, if known.
        name:         Name of the described component.
        cpe:          CPE identifier of the described product, if known.
        version:      Version of the described component.
        sha256:       Content hash of the SBOM document.
        license:      License expression of the described component.
        snippet:      Text snippet matching the query.
        classifier:   Component classifier (e.g. "application", "library").
        supplier:     Supplier label, often prefixed with "Organization: ".
        description:  Free-text description.
        dependencies: Package URLs of the direct dependencies.
        created:      Creation timestamp of the SBOM.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    purl: str | None = None
    name: str = ""
    cpe: str | None = None
    version: str = ""
    sha256: str = ""
    license: str = ""
    snippet: str = ""
    classifier: str = ""
    supplier: str = ""
    description: str = ""
    dependencies: list[str] = Field(default_factory=list)
    created: datetime
