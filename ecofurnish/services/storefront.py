# ecofurnish/services/storefront.py
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from ecofurnish.core.config import Settings
from ecofurnish.core.supabase_client import create_supabase
from ecofurnish.repositories.cart_repo import CartRepository
from ecofurnish.repositories.user_repo import ProfileRepository
from ecofurnish.services.cart_store import CartStore
from ecofurnish.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    """
    Everything one browser session works with.

    The stores are built once, wired to each other explicitly and
    handed to the routers by reference.
    """

    session: SessionStore
    cart: CartStore
    client: Any = None
    last_seen: float = field(default_factory=time.monotonic)
    requests: int = 0

    def touch(self) -> None:
        self.last_seen = time.monotonic()
        self.requests += 1

    async def close(self) -> None:
        await self.session.close()
        await self.cart.settle()


StorefrontFactory = Callable[[], Awaitable[Storefront]]


async def build_storefront(settings: Settings) -> Storefront:
    """
    Default factory: one Supabase client per browser session, shared by
    that session's stores.

    The PKCE flow keeps the OAuth code verifier in this client, so the
    redirect callback must be completed by the same storefront.
    """
    client = await create_supabase(settings, pkce=True)
    session = SessionStore(
        client.auth,
        ProfileRepository(client),
        redirect_url=f"{settings.SITE_URL.rstrip('/')}{settings.API_V1_STR}/auth/callback",
    )
    cart = CartStore(
        session,
        CartRepository(client),
        sync_attempts=settings.CART_SYNC_ATTEMPTS,
        sync_backoff=settings.CART_SYNC_BACKOFF_SECONDS,
    )
    await session.start()
    return Storefront(session=session, cart=cart, client=client)


class StorefrontRegistry:
    """
    Maps browser session ids to their Storefront.

    Entries are created on first use and evicted after `idle_ttl`
    seconds without a request. An entry that only ever served its first
    request (a client that drops the cookie) is evicted after
    `first_visit_ttl` instead.

    Builds are serialized per session id only: two requests carrying the
    same new id share one Storefront, different ids build concurrently.
    """

    def __init__(
        self,
        factory: StorefrontFactory,
        *,
        idle_ttl: float = 3600,
        first_visit_ttl: float | None = None,
    ):
        self.factory = factory
        self.idle_ttl = idle_ttl
        self.first_visit_ttl = idle_ttl if first_visit_ttl is None else first_visit_ttl
        self._entries: dict[str, Storefront] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sid: str) -> bool:
        return sid in self._entries

    async def get_or_create(self, sid: str) -> Storefront:
        await self.prune_idle()
        storefront = self._entries.get(sid)
        if storefront is None:
            async with self._locks.setdefault(sid, asyncio.Lock()):
                storefront = self._entries.get(sid)
                if storefront is None:
                    try:
                        storefront = await self.factory()
                    except Exception:
                        self._locks.pop(sid, None)
                        raise
                    self._entries[sid] = storefront
                    logger.info(f"Created storefront for session {sid[:8]}")
        storefront.touch()
        return storefront

    def _ttl(self, storefront: Storefront) -> float:
        return self.first_visit_ttl if storefront.requests <= 1 else self.idle_ttl

    async def prune_idle(self, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        expired = [
            sid for sid, storefront in self._entries.items()
            if now - storefront.last_seen > self._ttl(storefront)
        ]
        for sid in expired:
            storefront = self._entries.pop(sid, None)
            self._locks.pop(sid, None)
            # Another caller may have evicted it while we were closing.
            if storefront is None:
                continue
            logger.info(f"Evicting idle storefront {sid[:8]}")
            try:
                await storefront.close()
            except Exception:
                logger.exception(f"Error closing storefront {sid[:8]}")

    async def close_all(self) -> None:
        entries, self._entries = self._entries, {}
        self._locks.clear()
        for sid, storefront in entries.items():
            try:
                await storefront.close()
            except Exception:
                logger.exception(f"Error closing storefront {sid[:8]}")
