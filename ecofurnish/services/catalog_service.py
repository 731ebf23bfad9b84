# ecofurnish/services/catalog_service.py
import re
from urllib.parse import parse_qs, quote, unquote, urlsplit

from ecofurnish.models.cart import CartItem
from ecofurnish.models.product import Product

ALL_CATEGORIES = "All"

CATEGORIES: list[str] = [ALL_CATEGORIES, "Boards", "Furniture", "Outdoor", "Stationery", "Decor"]

PRODUCTS: list[Product] = [
    Product(
        id="1",
        name="PEP Board (1 m²)",
        description="Waterproof, insect-resistant board made from 100% recycled plastic",
        price=425,
        image="/assets/pep-board-product.png",
        category="Boards",
        features=["Waterproof", "UV Resistant", "Fire Safe"],
        badge="Best Seller",
    ),
    Product(
        id="2",
        name="Pencil Box",
        description="Premium handcrafted pencil box made from recycled PEP composite",
        price=129,
        image="/assets/pencil-box.png",
        category="Stationery",
        features=["Lightweight", "Durable", "Scratch Resistant"],
    ),
    Product(
        id="3",
        name="Wave Dining Table",
        description="Stunning dining table with ocean-wave pattern from recycled plastic",
        price=12500,
        image="/assets/eco-table.png",
        category="Furniture",
        features=["6 Seater", "Scratch Resistant", "Easy Clean"],
    ),
    Product(
        id="4",
        name="Bookshelf",
        description="Modern 5-tier bookshelf crafted from recycled PEP boards",
        price=4800,
        image="/assets/eco-shelf.png",
        category="Furniture",
        features=["5 Tiers", "Wall Mount", "Lightweight"],
    ),
    Product(
        id="5",
        name="Garden Bench",
        description="Weather-resistant outdoor bench perfect for gardens and patios",
        price=3200,
        image="/assets/eco-bench.png",
        category="Outdoor",
        features=["All Weather", "3 Seater", "10yr Warranty"],
        badge="New",
    ),
    Product(
        id="6",
        name="Chair",
        description="Minimal chair in recycled PEP composite with natural wood finish",
        price=800,
        image="/assets/chair.png",
        category="Furniture",
        features=["Waterproof", "Low Maintenance", "Sustainable"],
    ),
]

_FRAGMENT_CATEGORY = re.compile(r"[?&]category=([^&]+)")
# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "!'()*-._~"


class CatalogService:
    """
    Read-only access to the storefront catalog and its category deep links.

    Deep links live in the address fragment, e.g. `#products?category=Furniture`,
    so a filter can be preselected on load and updated without a reload.
    """

    def __init__(self, products: list[Product] | None = None, categories: list[str] | None = None):
        self.products = products if products is not None else PRODUCTS
        self.categories = categories if categories is not None else CATEGORIES

    def list_products(self, category: str | None = None) -> list[Product]:
        if category is None or category == ALL_CATEGORIES:
            return list(self.products)
        return [p for p in self.products if p.category == category]

    def get_product(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    @staticmethod
    def to_cart_item(product: Product) -> CartItem:
        """Snapshot the product fields a cart line keeps."""
        return CartItem(
            id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
            category=product.category,
            quantity=1,
        )

    def category_from_location(self, location: str) -> str | None:
        """
        Read the preselected category from a page location.

        The fragment wins (`#products?category=Stationery`); the regular
        query string is the fallback. Unknown categories are ignored.
        """
        parts = urlsplit(location)
        match = _FRAGMENT_CATEGORY.search(parts.fragment)
        if match:
            category = unquote(match.group(1))
        else:
            category = parse_qs(parts.query).get("category", [None])[0]

        if category and category in self.categories:
            return category
        return None

    @staticmethod
    def category_fragment(category: str, current_hash: str = "#products") -> str:
        """Fragment to push when a filter is clicked."""
        base = current_hash.split("?", 1)[0] or "#products"
        if category == ALL_CATEGORIES:
            return base
        return f"{base}?category={quote(category, safe=_URI_COMPONENT_SAFE)}"
