"""
Authentication for the FastAPI API.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from api.config import config
from utilities.logger import get_logger

logger = get_logger(__name__)

# Security scheme
security = HTTPBasic()


class CredentialValidator:
    """Checks HTTP Basic credentials against the configured account."""

    @staticmethod
    def validate(username: str, password: str) -> bool:
        """
        Validate a username/password pair.
        
        Args:
            username: Supplied username
            password: Supplied password
            
        Returns:
            True if both match the configured account, False otherwise
        """
        username_ok = secrets.compare_digest(
            username.encode("utf-8"), config.api_username.encode("utf-8")
        )
        password_ok = secrets.compare_digest(
            password.encode("utf-8"), config.api_password.encode("utf-8")
        )
        return username_ok and password_ok


async def verify_credentials(
    credentials: HTTPBasicCredentials = Depends(security)
) -> str:
    """
    Verify HTTP Basic credentials from the request.
    
    Args:
        credentials: Parsed Authorization header
        
    Returns:
        The authenticated username
        
    Raises:
        HTTPException: If the credentials are invalid
    """
    if not CredentialValidator.validate(credentials.username, credentials.password):
        logger.warning("Invalid credentials", username=credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    
    return credentials.username
