from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.models.credential import Credential

# auto_error=False: a missing header is a valid, unauthenticated caller
bearer_scheme = HTTPBearer(auto_error=False)


async def get_credential(
    authorization: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Credential | None:
    """Extract the caller's bearer token, if any, for forwarding to the backends.

    The token is not validated here; the search backends decide whether to accept it.

    Args:
        authorization (HTTPAuthorizationCredentials | None): The parsed Authorization header.

    Returns:
        Credential | None: The caller credential, or None for unauthenticated callers.
    """
    if authorization is None or not authorization.credentials:
        return None
    return Credential(token=authorization.credentials)
