"""Maps SBOM search hits to the public SbomSummary shape."""

from shared.clients.sbom.models.SbomDocument import SbomDocument
from shared.clients.search.models.Search import SearchHit
from server.models.responses import SbomSummary

SUPPLIER_PREFIX = "Organization: "
SBOM_HREF_TEMPLATE = "/api/v1/sbom?id={id}"


def normalize_supplier(supplier: str) -> str:
    """Strip every leading "Organization: " prefix from a supplier label.

    Args:
        supplier (str): The raw supplier label.

    Returns:
        str: The label without the prefix, unchanged if it has none.
    """
    while supplier.startswith(SUPPLIER_PREFIX):
        supplier = supplier[len(SUPPLIER_PREFIX):]
    return supplier


def sbom_href(sbom_id: str) -> str:
    return SBOM_HREF_TEMPLATE.format(id=sbom_id)


def map_sbom_hit(hit: SearchHit[SbomDocument]) -> SbomSummary:
    """Build the summary of a single hit. Never fails; missing metadata becomes an empty dict.

    Args:
        hit (SearchHit[SbomDocument]): The backend hit.

    Returns:
        SbomSummary: A fresh summary with ``advisories`` unset.
    """
    document = hit.document
    return SbomSummary(
        id=document.id,
        purl=document.purl,
        name=document.name,
        cpe=document.cpe,
        version=document.version,
        sha256=document.sha256,
        license=document.license,
        snippet=document.snippet,
        classifier=document.classifier,
        supplier=normalize_supplier(document.supplier),
        href=sbom_href(document.id),
        description=document.description,
        dependencies=list(document.dependencies),
        vulnerabilities=[],
        advisories=None,
        created=document.created,
        metadata=hit.metadata if hit.metadata is not None else {},
    )


def map_sbom_hits(hits: list[SearchHit[SbomDocument]]) -> list[SbomSummary]:
    """Map hits in backend order."""
    return [map_sbom_hit(hit) for hit in hits]
