from fastapi import APIRouter, Depends, Request

from shared.clients.search.models.Search import SearchOptions
from shared.models.credential import Credential
from server.dependencies.auth import get_credential
from server.dependencies.search import get_search_options, get_search_params
from server.models.requests import SbomSearchParams
from server.models.responses import SbomVulnerabilitySummary, SearchResultSbom

router = APIRouter(prefix="/api/v1/sbom", tags=["sbom"])


@router.get("/search", response_model=SearchResultSbom)
async def search_sboms(
    request: Request,
    params: SbomSearchParams = Depends(get_search_params),
    options: SearchOptions = Depends(get_search_options),
    credential: Credential | None = Depends(get_credential),
) -> SearchResultSbom:
    """Search SBOMs and report the number of advisories affecting each result.

    Args:
        request (Request): FastAPI request (provides app.state.sbom_search_service).
        params (SbomSearchParams): Query text and pagination.
        options (SearchOptions): Explain/metadata/summaries toggles.
        credential (Credential | None): Optional bearer credential, forwarded to both backends.

    Returns:
        SearchResultSbom: The page of SBOM summaries with the total number of matches.
    """
    search_service = request.app.state.sbom_search_service
    return await search_service.search(params, options, credential)


@router.get("/vulnerabilities", response_model=list[SbomVulnerabilitySummary])
async def sboms_with_vulnerability_summary(
    request: Request,
    params: SbomSearchParams = Depends(get_search_params),
    credential: Credential | None = Depends(get_credential),
) -> list[SbomVulnerabilitySummary]:
    """Count the advisories of each matching SBOM per severity bucket.

    Args:
        request (Request): FastAPI request (provides app.state.vulnerability_summary_service).
        params (SbomSearchParams): Query text and pagination of the SBOM search.
        credential (Credential | None): Optional bearer credential, forwarded to both backends.

    Returns:
        list[SbomVulnerabilitySummary]: One severity histogram per SBOM, in search order.
    """
    summary_service = request.app.state.vulnerability_summary_service
    return await summary_service.summarize(params, credential)
