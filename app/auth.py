"""HTTP Basic authorization for the stats page."""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.config import STATS_PASSWORD, STATS_USERNAME
from app.logging_config import logger

REALM = "Please enter your credentials"

security = HTTPBasic(realm=REALM, auto_error=False)


def credentials_match(credentials: HTTPBasicCredentials | None) -> bool:
    """Return True when the credentials equal the configured stats user."""
    if credentials is None:
        return False
    username_ok = secrets.compare_digest(
        credentials.username.encode(), STATS_USERNAME.encode()
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode(), STATS_PASSWORD.encode()
    )
    return username_ok and password_ok


def authorize_stats(
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> str:
    """FastAPI dependency rejecting requests without valid stats credentials.

    Returns:
        The authenticated username.

    Raises:
        HTTPException: 401 with a Basic challenge when credentials are
            missing or wrong.
    """
    if not credentials_match(credentials):
        logger.warning("STATS_UNAUTHORIZED")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
        )
    return credentials.username
