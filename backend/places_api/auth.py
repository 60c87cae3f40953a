"""
Bearer-token authentication for FastAPI routes.

Routes that mutate places, or otherwise need the caller's identity,
declare ``identity: Identity = Depends(require_identity)``.  Public
routes simply do not declare it.  The resolved ``Identity`` is passed
on to the services explicitly.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from places_api.errors import TokenInvalid, Unauthenticated
from places_api.services.credentials import verify_token
from places_api.services.identity import Identity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """Return the authenticated caller or raise ``Unauthenticated``."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authentication failed! No token provided.")

    try:
        claims = verify_token(credentials.credentials)
    except TokenInvalid as e:
        logger.info("Rejected token: %s", e)
        raise Unauthenticated("Authentication failed! Invalid or expired token.") from e

    return Identity(user_id=claims.user_id, email=claims.email)
