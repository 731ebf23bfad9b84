# ecofurnish/routers/products.py
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecofurnish.core.errors import ERROR_PRODUCT_NOT_FOUND
from ecofurnish.schemas.product import CategoryDeepLink, ProductRead
from ecofurnish.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])


@lru_cache
def get_catalog() -> CatalogService:
    return CatalogService()


@router.get("", response_model=list[ProductRead])
async def list_products(
    category: str | None = Query(default=None, description="Category filter; 'All' or empty lists everything"),
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Public product listing.
    """
    return catalog.list_products(category)


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: CatalogService = Depends(get_catalog)):
    """Filter buttons, in display order."""
    return catalog.categories


@router.get("/deep-link", response_model=CategoryDeepLink)
async def resolve_deep_link(
    location: str = Query(description="Page location, e.g. '/#products?category=Furniture'"),
    current_hash: str = Query(default="#products"),
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Resolve the preselected category of a page location and the
    fragment that represents it.
    """
    category = catalog.category_from_location(location)
    fragment = catalog.category_fragment(category or "All", current_hash)
    return CategoryDeepLink(category=category, fragment=fragment)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog),
):
    """
    Public product detail.
    """
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ERROR_PRODUCT_NOT_FOUND,
        )
    return product
