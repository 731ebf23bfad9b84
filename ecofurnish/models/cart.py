# ecofurnish/models/cart.py
from typing import Any

from sqlmodel import SQLModel, Field


class CartItem(SQLModel):
    """
    One cart line held in memory.

    `id` is the product id: one cart cannot have 2 lines for the same product.
    Name, price, image and category are a snapshot of the product taken
    when it was first added.
    """

    id: str = Field(description="Product id")
    name: str
    price: int = Field(ge=0, description="Unit price in the smallest currency unit")
    image: str = ""
    category: str = ""
    quantity: int = Field(default=1, gt=0, description="Must be >= 1")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


class CartItemRow(SQLModel):
    """
    Row of the remote `cart_items` table.

    Unique on (user_id, product_id). The product fields are stored
    denormalized in `product_data` (JSONB), so later catalog price
    changes do not touch lines already in a cart.
    """

    user_id: str
    product_id: str
    quantity: int = Field(gt=0)
    product_data: dict[str, Any] | None = None

    @classmethod
    def from_item(cls, user_id: str, item: CartItem) -> "CartItemRow":
        return cls(
            user_id=user_id,
            product_id=item.id,
            quantity=item.quantity,
            product_data={
                "name": item.name,
                "price": item.price,
                "image": item.image,
                "category": item.category,
            },
        )

    def to_item(self) -> CartItem | None:
        """
        Rebuild the in-memory line, or None when the snapshot is missing
        (such rows cannot be displayed and are skipped).
        """
        data = self.product_data
        if not isinstance(data, dict):
            return None
        return CartItem(
            id=self.product_id,
            name=data.get("name") or "Product",
            price=int(data.get("price") or 0),
            image=data.get("image") or "",
            category=data.get("category") or "",
            quantity=self.quantity,
        )
