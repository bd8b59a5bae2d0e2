"""
Static bearer-token check for the risk-prediction endpoints.

When settings.API_TOKEN is empty the check is disabled (local development).
"""
import hmac
from typing import Optional

from fastapi import Header

from app.core.config import settings
from app.core.errors import UnauthenticatedError

SCHEME = "Bearer"


def require_api_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> None:
    expected = settings.API_TOKEN
    if not expected:
        return

    if not authorization:
        raise UnauthenticatedError("Missing authorization header.")

    prefix = f"{SCHEME} "
    if not authorization.startswith(prefix):
        raise UnauthenticatedError(f"Invalid authorization scheme. Expected: {SCHEME}")

    token = authorization[len(prefix):]
    if not hmac.compare_digest(token.encode(), expected.encode()):
        raise UnauthenticatedError("Invalid API token.")
