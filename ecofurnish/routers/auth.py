# ecofurnish/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from ecofurnish.core.auth import decode_access_token, get_storefront
from ecofurnish.core.config import Settings, get_settings
from ecofurnish.core.errors import ERROR_INVALID_CREDENTIALS, ERROR_OAUTH_UNAVAILABLE
from ecofurnish.schemas.user import (
    AuthModalUpdate,
    LoginRequest,
    OAuthRedirect,
    SessionRestore,
    SessionState,
    SignupRequest,
    UserRead,
)
from ecofurnish.services.session_store import SessionStore
from ecofurnish.services.storefront import Storefront

router = APIRouter(tags=["Auth"])


def session_state(store: SessionStore) -> SessionState:
    user = store.user
    return SessionState(
        user=UserRead.model_validate(user.model_dump()) if user else None,
        is_authenticated=store.is_authenticated,
        is_auth_modal_open=store.is_auth_modal_open,
        auth_mode=store.auth_mode,
    )


@router.get("/session", response_model=SessionState)
async def read_session(storefront: Storefront = Depends(get_storefront)):
    """
    Return who is signed in for this browser, plus modal state.
    """
    return session_state(storefront.session)


@router.put("/session/modal", response_model=SessionState)
async def update_auth_modal(
    payload: AuthModalUpdate,
    storefront: Storefront = Depends(get_storefront),
):
    """Open (optionally switching login/signup) or close the auth modal."""
    store = storefront.session
    if payload.open:
        store.open_auth_modal(payload.mode or store.auth_mode)
    else:
        store.close_auth_modal()
    return session_state(store)


@router.post("/auth/login", response_model=SessionState)
async def login(
    payload: LoginRequest,
    storefront: Storefront = Depends(get_storefront),
):
    """
    Password sign-in.

    Any failure (wrong password, unknown user, backend down) gives the
    same 401 message.
    """
    if not await storefront.session.login(payload.email, payload.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_INVALID_CREDENTIALS,
        )
    return session_state(storefront.session)


@router.post("/auth/signup", response_model=SessionState)
async def signup(
    payload: SignupRequest,
    storefront: Storefront = Depends(get_storefront),
):
    """
    Create an account and its profile row, then sign in.
    """
    if not await storefront.session.signup(payload.name, payload.email, payload.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_INVALID_CREDENTIALS,
        )
    return session_state(storefront.session)


@router.post("/auth/google", response_model=OAuthRedirect)
async def login_with_google(storefront: Storefront = Depends(get_storefront)):
    """
    Start Google sign-in. The client must send the browser to `url`;
    the provider then comes back to `/auth/callback`.
    """
    url = await storefront.session.login_with_google()
    if not url:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ERROR_OAUTH_UNAVAILABLE,
        )
    return OAuthRedirect(url=url)


@router.get("/auth/callback")
async def oauth_callback(
    code: str | None = None,
    storefront: Storefront = Depends(get_storefront),
    settings: Settings = Depends(get_settings),
):
    """
    OAuth redirect target. Completes the session and sends the browser
    back to the site (failures are logged, the site still loads).
    """
    if code:
        await storefront.session.complete_oauth(code)
    return RedirectResponse(settings.SITE_URL, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/auth/session", response_model=SessionState)
async def restore_session(
    payload: SessionRestore,
    storefront: Storefront = Depends(get_storefront),
):
    """
    Adopt a session the browser already holds.

    The access token is verified locally before it is handed to Supabase.
    """
    decode_access_token(payload.access_token)
    if not await storefront.session.restore_session(payload.access_token, payload.refresh_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_INVALID_CREDENTIALS,
        )
    return session_state(storefront.session)


@router.post("/auth/logout", response_model=SessionState)
async def logout(storefront: Storefront = Depends(get_storefront)):
    """
    Sign out. Local state is cleared even if the backend call fails.
    """
    await storefront.session.logout()
    return session_state(storefront.session)
