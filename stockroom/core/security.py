"""
Basic security implementation for the stockroom API
"""

import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from stockroom.core.config import get_settings

security = HTTPBasic()


def get_current_username(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """
    Simple HTTP Basic Auth - checks username/password from settings
    """
    settings = get_settings()
    correct_username = settings.BASIC_AUTH_USERNAME
    correct_password = settings.BASIC_AUTH_PASSWORD

    # If no password is set in production, refuse everything
    if not correct_password and settings.ENVIRONMENT == "production":
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Basic auth password not configured"
        )

    # In development, allow a default password
    if not correct_password:
        correct_password = "changeme"

    is_correct_username = secrets.compare_digest(
        credentials.username.encode("utf8"),
        correct_username.encode("utf8")
    )
    is_correct_password = secrets.compare_digest(
        credentials.password.encode("utf8"),
        correct_password.encode("utf8")
    )

    if not (is_correct_username and is_correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def require_auth():
    """
    Dependency to require authentication
    Usage: app.include_router(router, dependencies=[require_auth()])
    """
    return Depends(get_current_username)
