"""
API Dependencies

Routes never authorize on their own: they collect the caller's credential
and request metadata and pass them to the service explicitly.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.services.actions import Credentials


security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Raw bearer token, or None when the header is missing"""
    if not credentials:
        return None
    return credentials.credentials


async def get_credentials(
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
) -> Credentials:
    """
    Caller credentials plus client metadata for the audit trail.
    Honors X-Forwarded-For when running behind a proxy.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None

    return Credentials(
        token=token,
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
    )


def query_params(request: Request) -> Dict[str, Any]:
    """Query string as a plain dict; validated by the service schema"""
    return dict(request.query_params)
