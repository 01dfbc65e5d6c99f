"""
Authentication dependencies for the presentation layer.

Resolves the bearer token on a request to the current user.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rd_prediction.domain.entities.user import User
from rd_prediction.presentation.api.dependencies.services import AuthServiceDep

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    auth_service: AuthServiceDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """
    Return the user identified by the request's bearer token.

    Raises:
        HTTPException: 401 if no bearer token is present
        AuthenticationException: If the token is invalid or the user is gone
    """
    if credentials is None or not credentials.credentials:
        logger.debug("Request without bearer token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await auth_service.authenticate_token(credentials.credentials)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
