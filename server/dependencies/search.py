from fastapi import Query

from shared.clients.search.models.Search import SearchOptions
from server.models.requests import SbomSearchParams


async def get_search_params(
    q: str = Query(..., description="Free-text SBOM query."),
    offset: int = Query(0, ge=0, description="Index of the first result."),
    limit: int | None = Query(None, ge=0, description="Page size. Backend default if omitted."),
) -> SbomSearchParams:
    return SbomSearchParams(q=q, offset=offset, limit=limit)


async def get_search_options(
    explain: bool = Query(False, description="Include the scoring rationale."),
    metadata: bool = Query(False, description="Include the per-item metadata blob."),
    summaries: bool = Query(False, description="Include aggregate summaries."),
) -> SearchOptions:
    return SearchOptions(explain=explain, metadata=metadata, summaries=summaries)
