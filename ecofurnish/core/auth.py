# ecofurnish/core/auth.py
import secrets
from typing import Any

from fastapi import Depends, HTTPException, Request, Response, status
from jose import jwt, JWTError

from ecofurnish.core.config import Settings, get_settings
from ecofurnish.core.errors import ERROR_INVALID_TOKEN
from ecofurnish.services.storefront import Storefront, StorefrontRegistry


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Args:
        token: raw JWT handed over by the browser.

    Returns:
        Decoded JWT claims.

    Raises:
        HTTPException(401): if token is invalid/expired or has no subject.
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_INVALID_TOKEN,
        )

    if not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_INVALID_TOKEN,
        )
    return claims


def get_registry(request: Request) -> StorefrontRegistry:
    """The registry built in the application lifespan."""
    return request.app.state.storefronts


async def get_storefront(
    request: Request,
    response: Response,
    registry: StorefrontRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> Storefront:
    """
    Resolve the calling browser's Storefront from the session cookie.

    Flow:
      1. Read the opaque session id cookie.
      2. If missing, mint a new id and set the cookie (HttpOnly, Lax).
      3. Return the registry entry, creating it on first use.
    """
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not sid:
        sid = secrets.token_urlsafe(32)
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            sid,
            httponly=True,
            samesite="lax",
            max_age=settings.SESSION_IDLE_TTL_SECONDS,
        )
    return await registry.get_or_create(sid)

