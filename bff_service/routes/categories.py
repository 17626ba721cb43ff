"""
Category routes, served by the product service under /categories
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from bff_service.config import CATEGORY_SERVICE
from bff_service.routes.helpers import (
    backend_dependency,
    backend_health,
    forward,
    log_request,
    validate,
)
from bff_service.services.backend_proxy import BackendProxy, join_path
from bff_service.utils.validators import (
    ValidationRule,
    is_present,
    is_valid_category_name,
    is_valid_product_id,
)

router = APIRouter()

get_category_service = backend_dependency(CATEGORY_SERVICE)

CATEGORY_ID_RULE = ValidationRule(
    "id", is_valid_product_id, "Invalid category ID provided. Must be a positive number."
)
CATEGORY_NAME_RULES = [
    ValidationRule("name", is_present, "Category name is required"),
    ValidationRule("name", is_valid_category_name, "Category name must be between 2 and 100 characters"),
]


@router.get("/health")
async def category_service_health(backend: BackendProxy = Depends(get_category_service)):
    """Proxy to the product service health check"""
    return await backend_health(backend, "Category")


@router.get("")
async def get_all_categories(request: Request, backend: BackendProxy = Depends(get_category_service)):
    """Get all categories"""
    log_request(request, "Getting all categories")
    return await forward(
        request, backend, "getAllCategories", "GET",
        success_message="Categories retrieved successfully",
    )


@router.get("/{category_id}")
async def get_category(request: Request, category_id: str, backend: BackendProxy = Depends(get_category_service)):
    """Get category by ID"""
    log_request(request, "Getting category by ID")
    failure = validate(request, {"id": category_id}, [CATEGORY_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getCategoryById", "GET", join_path(category_id.strip()),
        success_message="Category retrieved successfully",
    )


@router.post("")
async def create_category(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_category_service),
):
    """Create a new category"""
    payload = payload or {}
    log_request(request, "Creating new category", payload)
    failure = validate(request, payload, CATEGORY_NAME_RULES)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "createCategory", "POST",
        json_body=payload,
        success_status=201,
        success_message="Category created successfully",
    )


@router.put("/{category_id}")
async def update_category(
    request: Request,
    category_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_category_service),
):
    """Update a category"""
    payload = payload or {}
    log_request(request, "Updating category", payload)
    failure = validate(request, {**payload, "id": category_id}, [CATEGORY_ID_RULE, *CATEGORY_NAME_RULES])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "updateCategory", "PUT", join_path(category_id.strip()),
        json_body=payload,
        success_message="Category updated successfully",
    )


@router.delete("/{category_id}")
async def delete_category(request: Request, category_id: str, backend: BackendProxy = Depends(get_category_service)):
    """Delete a category"""
    log_request(request, "Deleting category")
    failure = validate(request, {"id": category_id}, [CATEGORY_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "deleteCategory", "DELETE", join_path(category_id.strip()),
        success_message="Category deleted successfully",
    )
