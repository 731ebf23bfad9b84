# ecofurnish/schemas/product.py
from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: str
    name: str
    description: str
    price: int
    image: str
    category: str
    features: list[str]
    badge: str | None = None


class CategoryDeepLink(SQLModel):
    """
    Category resolved from a page location, plus the fragment to push
    for it (`#products` when nothing is preselected).
    """

    category: str | None = None
    fragment: str
