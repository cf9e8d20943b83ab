"""Caller credential forwarded to the search backends."""

from pydantic import BaseModel, ConfigDict


class Credential(BaseModel):
    """Bearer token presented by the caller.

    Never stored by a client and never mutated: it is handed read-only to each
    backend request and turned into an ``Authorization`` header there. An absent
    credential is represented by ``None`` at the call sites, not by an empty token.
    """

    model_config = ConfigDict(frozen=True)

    token: str

    def as_header(self) -> dict[str, str]:
        """Return the HTTP header that forwards this credential unchanged."""
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        # keep tokens out of logs and tracebacks
        return "Credential(token=***)"

    __str__ = __repr__
