# ecofurnish/schemas/cart.py
from sqlmodel import SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding one unit of a catalog product.
    """

    product_id: str


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    Zero or a negative quantity removes the line.
    """

    quantity: int


class CartPanelUpdate(SQLModel):
    open: bool


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    id: str
    name: str
    price: int
    image: str
    category: str
    quantity: int
    line_total: int


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_items: int
    total_price: int
    is_cart_open: bool
