# ecofurnish/services/session_store.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Literal

from ecofurnish.models.user import Profile, User
from ecofurnish.repositories.user_repo import ProfileRepository

logger = logging.getLogger(__name__)

AuthMode = Literal["login", "signup"]
UserListener = Callable[[User | None], Awaitable[None]]


def _metadata(auth_user: Any) -> dict[str, Any]:
    return getattr(auth_user, "user_metadata", None) or {}


def default_name(auth_user: Any) -> str:
    """
    Display name when the profile has none:
    provider full name, then the local part of the email, then "User".
    """
    full_name = _metadata(auth_user).get("full_name")
    if full_name:
        return full_name
    email = getattr(auth_user, "email", None) or ""
    local_part = email.split("@", 1)[0]
    return local_part or "User"


def user_from_metadata(auth_user: Any) -> User:
    return User(
        id=auth_user.id,
        email=auth_user.email or "",
        name=default_name(auth_user),
        avatar_url=_metadata(auth_user).get("avatar_url"),
    )


class SessionStore:
    """
    Single source of truth for "who is logged in".

    Responsibilities:
      - password / federated sign-in, sign-up and sign-out
      - follow Supabase auth-state notifications (OAuth completion,
        expiry, sign-out elsewhere)
      - fetch-or-create the visitor's profile row
      - notify listeners (the cart) whenever the user is replaced

    No operation raises: backend failures are logged and reported
    as a False / None result.
    """

    def __init__(
        self,
        auth: Any,
        profile_repo: ProfileRepository,
        *,
        redirect_url: str | None = None,
    ):
        self.auth = auth
        self.profile_repo = profile_repo
        self.redirect_url = redirect_url

        self.user: User | None = None
        self.is_auth_modal_open = False
        self.auth_mode: AuthMode = "login"

        self._listeners: list[UserListener] = []
        self._subscription = None
        self._pending: set[asyncio.Task] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # ---- lifecycle ----

    async def start(self) -> None:
        """Subscribe to auth changes and pick up an existing session."""
        self._loop = asyncio.get_running_loop()
        self._subscription = self.auth.on_auth_state_change(self._on_auth_state_change)
        try:
            session = await self.auth.get_session()
        except Exception as e:
            logger.warning(f"Session check failed: {e}")
            return
        if session is not None and session.user is not None:
            await self._adopt(session.user)

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        await self.settle()

    async def settle(self) -> None:
        """Wait until queued auth notifications have been applied."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def subscribe(self, listener: UserListener) -> None:
        self._listeners.append(listener)

    # ---- modal ----

    def open_auth_modal(self, mode: AuthMode = "login") -> None:
        self.auth_mode = mode
        self.is_auth_modal_open = True

    def close_auth_modal(self) -> None:
        self.is_auth_modal_open = False

    # ---- auth notifications ----

    def _on_auth_state_change(self, event: Any, session: Any) -> None:
        email = session.user.email if session is not None and session.user else None
        logger.info(f"Auth state changed: {event} {email}")
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Token refresh timers may notify from outside the event loop.
            if self._loop is not None:
                self._loop.call_soon_threadsafe(self._schedule, session)
            return
        self._schedule(session)

    def _schedule(self, session: Any) -> None:
        task = asyncio.get_running_loop().create_task(self._apply_auth_state(session))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _apply_auth_state(self, session: Any) -> None:
        if session is not None and session.user is not None:
            await self._adopt(session.user)
        else:
            await self._set_user(None)

    # ---- profile ----

    async def resolve_profile(self, auth_user: Any) -> User:
        """
        Fetch the profile row, creating it from auth metadata when missing.

        Never raises: on backend failure the user is built from metadata.
        """
        try:
            profile = await self.profile_repo.get_by_id(auth_user.id)
            if profile is not None:
                user = User(
                    id=auth_user.id,
                    email=auth_user.email or "",
                    name=profile.name or default_name(auth_user),
                    avatar_url=profile.avatar_url or _metadata(auth_user).get("avatar_url"),
                )
                logger.info(f"Setting user from profile: {user.id}")
                return user

            user = user_from_metadata(auth_user)
            await self.profile_repo.create(
                Profile(
                    id=user.id,
                    email=auth_user.email,
                    name=user.name,
                    avatar_url=user.avatar_url,
                )
            )
            logger.info(f"Setting user (new profile): {user.id}")
            return user
        except Exception as e:
            logger.error(f"Error loading user profile: {e}")
            return user_from_metadata(auth_user)

    async def _adopt(self, auth_user: Any) -> None:
        await self._set_user(await self.resolve_profile(auth_user))

    async def _adopt_once(self, auth_user: Any) -> None:
        """Adopt `auth_user` unless the sign-in notification already did."""
        await self.settle()
        if self.user is None or self.user.id != auth_user.id:
            await self._adopt(auth_user)

    async def _set_user(self, user: User | None) -> None:
        self.user = user
        for listener in list(self._listeners):
            try:
                await listener(user)
            except Exception:
                logger.exception("User listener failed")

    # ---- operations ----

    async def login(self, email: str, password: str) -> bool:
        try:
            response = await self.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.error(f"Login error: {e}")
            return False

        if response.user is None:
            return False

        await self._adopt_once(response.user)
        self.close_auth_modal()
        return True

    async def signup(self, name: str, email: str, password: str) -> bool:
        try:
            response = await self.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": name}},
                }
            )
        except Exception as e:
            logger.error(f"Signup error: {e}")
            return False

        if response.user is None:
            return False

        try:
            await self.profile_repo.create(
                Profile(id=response.user.id, email=response.user.email, name=name)
            )
        except Exception as e:
            # The account exists; the profile is created again on adopt.
            logger.error(f"Error creating profile: {e}")

        await self._adopt_once(response.user)
        self.close_auth_modal()
        return True

    async def login_with_google(self) -> str | None:
        """
        Start the Google redirect flow.

        Returns the provider URL the browser must be sent to. Local state
        changes later, when the redirect completes (see `complete_oauth`).
        """
        credentials: dict[str, Any] = {"provider": "google"}
        if self.redirect_url:
            credentials["options"] = {"redirect_to": self.redirect_url}
        try:
            response = await self.auth.sign_in_with_oauth(credentials)
        except Exception as e:
            logger.error(f"Google login error: {e}")
            return None
        return response.url

    async def complete_oauth(self, code: str) -> bool:
        """
        Exchange the redirect `code` for a session.

        The user itself is set by the auth-state notification the exchange
        emits; this waits for it to be applied.
        """
        try:
            await self.auth.exchange_code_for_session({"auth_code": code})
        except Exception as e:
            logger.error(f"OAuth callback error: {e}")
            return False
        await self.settle()
        if self.is_authenticated:
            self.close_auth_modal()
        return self.is_authenticated

    async def restore_session(self, access_token: str, refresh_token: str) -> bool:
        """Adopt a session issued to the browser elsewhere."""
        try:
            response = await self.auth.set_session(access_token, refresh_token)
        except Exception as e:
            logger.error(f"Session restore error: {e}")
            return False
        if response.user is not None:
            await self._adopt_once(response.user)
        return self.is_authenticated

    async def logout(self) -> None:
        try:
            await self.auth.sign_out()
        except Exception as e:
            logger.error(f"Logout error: {e}")
        await self.settle()
        await self._set_user(None)
