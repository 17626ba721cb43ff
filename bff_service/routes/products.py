"""
Product routes, forwarded to the product (catalog) service
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from bff_service.config import PRODUCT_SERVICE
from bff_service.routes.helpers import (
    backend_dependency,
    backend_health,
    forward,
    log_request,
    validate,
)
from bff_service.services.backend_proxy import BackendProxy, join_path
from bff_service.utils.validators import (
    PRODUCT_STATUSES,
    REVIEW_STATUSES,
    ValidationRule,
    is_not_blank,
    is_one_of,
    is_present,
    is_valid_product_id,
    is_valid_search_value,
)

router = APIRouter()

get_product_service = backend_dependency(PRODUCT_SERVICE)

PRODUCT_ID_RULE = ValidationRule(
    "id", is_valid_product_id, "Invalid product ID provided. Must be a positive number."
)


def _search_message(search_value: str):
    def message(result: Any) -> str:
        if isinstance(result, list) and result:
            return f"Found {len(result)} product(s) matching search criteria"
        return f"No products found matching search criteria: '{search_value}'"
    return message


@router.get("/health")
async def product_service_health(backend: BackendProxy = Depends(get_product_service)):
    """Proxy to the product service health check"""
    return await backend_health(backend, "Product")


@router.get("")
async def list_or_search_products(
    request: Request,
    search: Optional[str] = None,
    backend: BackendProxy = Depends(get_product_service),
):
    """Search products when ?search= is given, otherwise list all products"""
    if not search:
        log_request(request, "Getting all products")
        return await forward(
            request, backend, "getAllProducts", "GET",
            success_message="All products retrieved successfully",
        )

    log_request(request, "Searching products")
    rules = [
        ValidationRule("search", is_present, "Search value is required"),
        ValidationRule(
            "search", is_valid_search_value,
            "Search value must be between 2 and 100 characters long",
        ),
    ]
    failure = validate(request, {"search": search}, rules)
    if failure is not None:
        return failure

    search_value = search.strip()
    return await forward(
        request, backend, "searchProducts", "GET",
        params={"search": search_value},
        success_message=_search_message(search_value),
    )


@router.get("/approved")
async def get_approved_products(request: Request, backend: BackendProxy = Depends(get_product_service)):
    """Get all approved products (customer view)"""
    log_request(request, "Getting all approved products")
    return await forward(
        request, backend, "getAllApprovedProducts", "GET", "/approved",
        success_message="Approved products retrieved successfully",
    )


@router.get("/status/{status}")
async def get_products_by_status(
    request: Request,
    status: str,
    backend: BackendProxy = Depends(get_product_service),
):
    """Get products by review status"""
    log_request(request, "Getting products by status")
    rules = [
        ValidationRule(
            "status", is_one_of(PRODUCT_STATUSES),
            f"Invalid status. Must be one of: {', '.join(PRODUCT_STATUSES)}",
        ),
    ]
    failure = validate(request, {"status": status}, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getProductsByStatus", "GET", join_path("status", status.upper()),
        success_message=f"Products with status {status} retrieved successfully",
    )


@router.get("/categories/{category_name}")
async def get_products_by_category(
    request: Request,
    category_name: str,
    backend: BackendProxy = Depends(get_product_service),
):
    """Get products by category name"""
    log_request(request, "Getting products by category")
    rules = [ValidationRule("category_name", is_not_blank, "Category name is required")]
    failure = validate(request, {"category_name": category_name}, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getProductsByCategoryName", "GET", join_path("categories", category_name),
        success_message="Products retrieved by category successfully",
    )


@router.get("/{product_id}")
async def get_product(request: Request, product_id: str, backend: BackendProxy = Depends(get_product_service)):
    """Get product by ID"""
    log_request(request, "Getting product by ID")
    failure = validate(request, {"id": product_id}, [PRODUCT_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getProductById", "GET", join_path(product_id.strip()),
        success_message="Product retrieved successfully",
    )


@router.post("")
async def create_product(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_product_service),
):
    """Create a new product"""
    payload = payload or {}
    log_request(request, "Creating new product", payload)
    missing = "Missing required fields: name, sku, price"
    rules = [
        ValidationRule("name", bool, missing),
        ValidationRule("sku", bool, missing),
        ValidationRule("price", lambda value: value is not None, missing),
    ]
    failure = validate(request, payload, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "createProduct", "POST",
        json_body=payload,
        success_status=201,
        success_message="Product created successfully",
    )


@router.put("/{product_id}")
async def update_product(
    request: Request,
    product_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_product_service),
):
    """Update a product"""
    payload = payload or {}
    log_request(request, "Updating product", payload)
    failure = validate(request, {"id": product_id}, [PRODUCT_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "updateProduct", "PUT", join_path(product_id.strip()),
        json_body=payload,
        success_message="Product updated successfully",
    )


@router.delete("/{product_id}")
async def delete_product(request: Request, product_id: str, backend: BackendProxy = Depends(get_product_service)):
    """Delete a product"""
    log_request(request, "Deleting product")
    failure = validate(request, {"id": product_id}, [PRODUCT_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "deleteProduct", "DELETE", join_path(product_id.strip()),
        success_message="Product deleted successfully",
    )


@router.put("/{product_id}/review")
async def review_product(
    request: Request,
    product_id: str,
    status: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_product_service),
):
    """Approve or reject a product (PUT /{product_id}/review?status=APPROVED)"""
    payload = payload or {}
    log_request(request, "Reviewing product", payload)
    rules = [
        PRODUCT_ID_RULE,
        ValidationRule(
            "status", is_one_of(REVIEW_STATUSES),
            f"Invalid review status. Must be one of: {', '.join(REVIEW_STATUSES)}",
        ),
    ]
    failure = validate(request, {"id": product_id, "status": status}, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "reviewProduct", "PUT", join_path(product_id.strip(), "review"),
        json_body=payload,
        params={"status": status.upper()},
        success_message="Product reviewed successfully",
    )
