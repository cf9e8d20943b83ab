from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict:
    """Liveness of this service. Does not probe the search backends."""
    return {"status": "ok"}
