# ecofurnish/models/product.py
from sqlmodel import SQLModel, Field


class Product(SQLModel):
    """
    Catalog entry shown on the storefront.

    The catalog is static content shipped with the site; only cart
    lines (which snapshot these fields) are persisted remotely.
    """

    id: str
    name: str = Field(max_length=100)
    description: str = ""
    price: int = Field(ge=0, description="Price in the smallest currency unit")
    image: str = ""
    category: str = Field(max_length=50)
    features: list[str] = Field(default_factory=list)
    badge: str | None = None
