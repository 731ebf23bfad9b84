# ecofurnish/services/cart_store.py
import asyncio
import logging

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from ecofurnish.models.cart import CartItem, CartItemRow
from ecofurnish.models.user import User
from ecofurnish.repositories.cart_repo import CartRepository
from ecofurnish.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class CartStore:
    """
    Authoritative local cart with a best-effort mirror in Supabase.

    Responsibilities:
      - add / remove / update / clear lines (one line per product id)
      - compute totals from the current lines on every read
      - push the full snapshot to the backend after each write when
        the visitor is signed in (save-on-write)
      - replace the local cart with the backend one whenever the
        signed-in user changes (replace-on-read, no guest merge)

    Mutators update local state synchronously and schedule the remote
    write; callers never wait for it.
    """

    def __init__(
        self,
        session: SessionStore,
        repo: CartRepository,
        *,
        sync_attempts: int = 3,
        sync_backoff: float = 0.5,
    ):
        self.session = session
        self.repo = repo
        self.sync_attempts = max(1, sync_attempts)
        self.sync_backoff = sync_backoff

        self.items: list[CartItem] = []
        self.is_cart_open = False

        self._loaded_user_id: str | None = None
        # Bumped on every scheduled remote write; a queued save only runs
        # if it still carries the latest version.
        self._version = 0
        self._sync_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

        session.subscribe(self._on_user_changed)

    # ---- derived values ----

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> int:
        return sum(item.price * item.quantity for item in self.items)

    def get_item(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == product_id:
                return item
        return None

    # ---- mutators ----

    def add_to_cart(self, item: CartItem) -> None:
        """
        Add one unit of a product.

        An existing line is incremented; otherwise a new line with
        quantity 1 is appended. Opens the cart panel.
        """
        if self.get_item(item.id) is not None:
            self.items = [
                i.model_copy(update={"quantity": i.quantity + 1}) if i.id == item.id else i
                for i in self.items
            ]
        else:
            self.items = [*self.items, item.model_copy(update={"quantity": 1})]

        self.is_cart_open = True
        self._schedule_save()

    def remove_from_cart(self, product_id: str) -> None:
        self.items = [i for i in self.items if i.id != product_id]
        self._schedule_save()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        self.items = [
            i.model_copy(update={"quantity": quantity}) if i.id == product_id else i
            for i in self.items
        ]
        self._schedule_save()

    def clear_cart(self) -> None:
        self.items = []
        self._schedule_save()

    def set_cart_open(self, is_open: bool) -> None:
        self.is_cart_open = is_open

    # ---- remote mirror ----

    def _schedule_save(self) -> None:
        user = self.session.user
        if user is None:
            return

        self._version += 1
        rows = [CartItemRow.from_item(user.id, item) for item in self.items]
        task = asyncio.get_running_loop().create_task(
            self._save(user.id, rows, self._version)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, user_id: str, rows: list[CartItemRow], version: int) -> None:
        async with self._sync_lock:
            if version != self._version:
                logger.debug(f"Skipping superseded cart save v{version} for {user_id}")
                return
            current = self.session.user
            if current is None or current.id != user_id:
                logger.debug(f"Skipping cart save for signed-out user {user_id}")
                return

            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.sync_attempts),
                    wait=wait_exponential(multiplier=self.sync_backoff, max=10),
                    reraise=True,
                ):
                    with attempt:
                        await self.repo.replace_for_user(user_id, rows)
            except Exception as e:
                logger.error(f"Error saving cart to database: {e}")
                return

            logger.info(f"Saved cart v{version} for {user_id} ({len(rows)} lines)")

    async def load(self) -> None:
        """
        Replace the local cart with the signed-in user's remote cart.

        On backend failure the local cart is left as it is.
        """
        user = self.session.user
        if user is None:
            return

        try:
            rows = await self.repo.list_for_user(user.id)
        except Exception as e:
            logger.error(f"Error loading cart from database: {e}")
            return

        # The user may have changed while the request was in flight.
        if self.session.user is None or self.session.user.id != user.id:
            return

        items = [item for item in (row.to_item() for row in rows) if item is not None]
        self.items = items
        self._loaded_user_id = user.id
        logger.info(f"Loaded cart for {user.id} ({len(items)} lines)")

    async def _on_user_changed(self, user: User | None) -> None:
        if user is None:
            # Invalidate queued saves of the previous user.
            self._version += 1
            self.items = []
            self._loaded_user_id = None
            return

        if user.id != self._loaded_user_id:
            # Claimed before the fetch so a repeated notification for the
            # same user does not load twice.
            self._loaded_user_id = user.id
            self._version += 1
            await self.load()

    async def settle(self) -> None:
        """Wait for scheduled remote writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
