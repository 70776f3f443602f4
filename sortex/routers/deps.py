import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sortex.core.security import Identity, decode_identity_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity | None:
    if credentials is None:
        return None
    try:
        return decode_identity_token(credentials.credentials)
    except ValueError:
        logger.info("identity_token_rejected")
        return None


def get_current_identity(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
