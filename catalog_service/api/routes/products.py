from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Query, status

from catalog_service.api.dependencies import get_product_service
from catalog_service.domain.schemas.product import ProductCreate, ProductUpdate
from catalog_service.domain.schemas.responses import success_response
from catalog_service.services import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a product"
)
def create_product(
    data: ProductCreate,
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Creates a product."""
    product = product_service.create_product(data)
    return success_response(product_service.format_product_data(product))


@router.get(
    "",
    summary="List products"
)
def list_products(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Lists products ordered by name."""
    products = product_service.list_products(limit=limit, offset=offset)
    return success_response({
        "products": [product_service.format_product_data(p) for p in products],
        "pagination": {
            "limit": limit,
            "offset": offset,
            "total": product_service.count_products()
        }
    })


@router.get(
    "/by-name/{name}",
    summary="Find a product by name"
)
def get_product_by_name(
    name: str = Path(..., min_length=1),
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Gets product by name."""
    product = product_service.get_product_by_name(name)
    return success_response(product_service.format_product_data(product))


@router.get(
    "/{product_id}",
    summary="Get a product"
)
def get_product(
    product_id: str = Path(...),
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Gets product by ID."""
    product = product_service.get_product(product_id)
    return success_response(product_service.format_product_data(product))


@router.patch(
    "/{product_id}",
    summary="Update a product"
)
def update_product(
    data: ProductUpdate,
    product_id: str = Path(...),
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Updates the provided fields of a product."""
    product = product_service.update_product(product_id, data)
    return success_response(product_service.format_product_data(product))


@router.delete(
    "/{product_id}",
    summary="Delete a product"
)
def delete_product(
    product_id: str = Path(...),
    product_service: ProductService = Depends(get_product_service)
) -> Dict[str, Any]:
    """Deletes a product."""
    product_service.delete_product(product_id)
    return success_response({"productID": product_id})
