# ecofurnish/repositories/cart_repo.py
from supabase import AsyncClient

from ecofurnish.models.cart import CartItemRow


class CartRepository:
    """
    Data access layer for the `cart_items` table.

    Rows are unique on (user_id, product_id).
    """

    TABLE = "cart_items"

    def __init__(self, client: AsyncClient):
        self.client = client

    # Get rows for a user
    async def list_for_user(self, user_id: str) -> list[CartItemRow]:
        response = await (
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .execute()
        )
        return [CartItemRow.model_validate(row) for row in response.data or []]

    async def upsert_many(self, rows: list[CartItemRow]) -> None:
        if not rows:
            return
        await (
            self.client.table(self.TABLE)
            .upsert(
                [row.model_dump() for row in rows],
                on_conflict="user_id,product_id",
            )
            .execute()
        )

    async def delete_for_user(self, user_id: str) -> None:
        await self.client.table(self.TABLE).delete().eq("user_id", user_id).execute()

    async def delete_except(self, user_id: str, product_ids: list[str]) -> None:
        """Delete the user's rows whose product is not in `product_ids`."""
        if not product_ids:
            await self.delete_for_user(user_id)
            return
        await (
            self.client.table(self.TABLE)
            .delete()
            .eq("user_id", user_id)
            .not_.in_("product_id", product_ids)
            .execute()
        )

    async def replace_for_user(self, user_id: str, rows: list[CartItemRow]) -> None:
        """
        Make the user's remote cart equal to `rows`.

        Upsert first, prune second: if the prune fails the remote cart
        holds a superset of the local one, never an empty cart.
        """
        if not rows:
            await self.delete_for_user(user_id)
            return
        await self.upsert_many(rows)
        await self.delete_except(user_id, [row.product_id for row in rows])
