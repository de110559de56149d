"""
Authentication: Clerk session token validation and current user dependencies.

We only read the identity provider; profile documents live in MongoDB and
are written by the sync service, never here.

Clerk signs session tokens with RS256. We verify with:
- CLERK_JWT_KEY (PEM public key) when set: no network call per request.
- otherwise the instance JWKS at CLERK_JWKS_URL (PyJWKClient, keys cached).

The token comes from "Authorization: Bearer <jwt>" or the "__session" cookie.
"""

import logging
from functools import lru_cache
from typing import Annotated, Any, Optional

import httpx
import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from dreamdesk.config import get_settings
from dreamdesk.models.user import IdentityUser, UserMetadata, from_epoch_ms
from dreamdesk.services.errors import NotConfiguredError, UpstreamError
from dreamdesk.services.user_sync import display_name

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

SESSION_COOKIE = "__session"


@lru_cache
def _jwks_client(jwks_url: str) -> PyJWKClient:
    return PyJWKClient(jwks_url)


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Verify a Clerk session JWT and return its claims.
    Raises jwt.InvalidTokenError on any verification failure and
    NotConfiguredError when no verification key source is set.
    """
    settings = get_settings()
    if settings.clerk_jwt_key:
        key: Any = settings.clerk_jwt_key.replace("\\n", "\n")
    elif settings.clerk_jwks_url:
        key = _jwks_client(settings.clerk_jwks_url).get_signing_key_from_jwt(token).key
    else:
        logger.error("Neither CLERK_JWT_KEY nor CLERK_JWKS_URL is set")
        raise NotConfiguredError("Clerk session verification key not configured")
    return jwt.decode(
        token,
        key,
        algorithms=["RS256"],
        options={"verify_aud": False, "require": ["exp", "sub"]},
        leeway=5,
    )


async def get_current_user_id(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[str]:
    """
    Dependency: id of the signed-in user, or None.
    A missing, expired or invalid token is treated as "not signed in"; a token
    that cannot be verified because no key source is set raises NotConfiguredError.
    """
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except jwt.PyJWKClientError as e:
        logger.warning("JWKS lookup failed: %s", e)
        return None
    except jwt.InvalidTokenError as e:
        logger.warning("Session token verification failed: %s", e)
        return None
    return payload.get("sub") or None


async def require_authenticated(
    user_id: Annotated[Optional[str], Depends(get_current_user_id)],
) -> str:
    """Dependency: the signed-in user id; 401 when there is none."""
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user_id


async def fetch_identity_user(user_id: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> IdentityUser:
    """Read one user from the Clerk Backend API."""
    settings = get_settings()
    if not settings.clerk_secret_key:
        logger.error("CLERK_SECRET_KEY is not set")
        raise NotConfiguredError("Clerk secret key not configured")
    url = f"{settings.clerk_api_url.rstrip('/')}/users/{user_id}"
    async with httpx.AsyncClient(transport=transport, timeout=10.0) as client:
        try:
            response = await client.get(url, headers={"Authorization": f"Bearer {settings.clerk_secret_key}"})
        except httpx.RequestError as e:
            logger.error("Clerk API request failed: %s", e)
            raise UpstreamError("Failed to fetch user") from e
    if response.status_code != 200:
        logger.error("Clerk API error (%d): %s", response.status_code, response.text)
        raise UpstreamError("Failed to fetch user", response.status_code, response.text)
    return IdentityUser.model_validate(response.json())


def to_metadata(user: IdentityUser) -> UserMetadata:
    return UserMetadata(
        id=user.id,
        email=user.email_addresses[0].email_address if user.email_addresses else None,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=display_name(user.first_name, user.last_name),
        image_url=user.image_url,
        created_at=from_epoch_ms(user.created_at),
        last_sign_in_at=from_epoch_ms(user.last_sign_in_at),
    )


async def get_current_user_metadata(
    user_id: Annotated[Optional[str], Depends(get_current_user_id)],
) -> Optional[UserMetadata]:
    """Dependency: identity-provider view of the signed-in user, or None."""
    if not user_id:
        return None
    return to_metadata(await fetch_identity_user(user_id))
