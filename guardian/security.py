"""
API Security Module
====================
Handles API key verification for incoming webhook calls.

The WhatsApp transport is configured to send the shared secret in the
X-API-Key header. A mismatch is rejected with 401 before any routing
happens, so unauthenticated callers can never trigger sends.
"""

from fastapi import Header, HTTPException

from guardian.config import API_KEY


def verify_api_key(x_api_key: str = Header(default="")) -> str:
    """
    Validate the X-API-Key header against the configured API key.

    Args:
        x_api_key: API key from X-API-Key header

    Returns:
        The API key string if valid

    Raises:
        HTTPException: 401 if the key does not match
    """
    if x_api_key != API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key
