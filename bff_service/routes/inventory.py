"""
Inventory routes, forwarded to the inventory service
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from bff_service.config import INVENTORY_SERVICE
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
    is_non_negative_number,
    is_present,
    is_valid_sku_code,
    validation_message,
)

router = APIRouter()

get_inventory_service = backend_dependency(INVENTORY_SERVICE)

SKU_RULE = ValidationRule(
    "sku", is_valid_sku_code, validation_message("SKU", "must be between 2 and 50 characters")
)
QUANTITY_RULE = ValidationRule(
    "quantity", is_non_negative_number, "Quantity must be a non-negative number"
)


@router.get("/health")
async def inventory_service_health(backend: BackendProxy = Depends(get_inventory_service)):
    """Proxy to the inventory service health check"""
    return await backend_health(backend, "Inventory")


@router.get("")
async def get_all_inventories(request: Request, backend: BackendProxy = Depends(get_inventory_service)):
    log_request(request, "Getting all inventories")
    return await forward(
        request, backend, "getAllInventories", "GET",
        success_message="All inventories retrieved successfully",
    )


@router.post("")
async def create_inventory(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_inventory_service),
):
    """Create the inventory record for a product"""
    payload = payload or {}
    log_request(request, "Creating inventory for product", payload)
    rules = [
        ValidationRule("sku", is_present, "SKU is required"),
        SKU_RULE,
        QUANTITY_RULE,
    ]
    failure = validate(request, payload, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "createInventoryForProduct", "POST",
        json_body=payload,
        success_status=201,
        success_message=f"Inventory created successfully for product SKU: {payload['sku']}",
    )


@router.get("/{sku}/exists")
async def check_inventory_exists(request: Request, sku: str, backend: BackendProxy = Depends(get_inventory_service)):
    """Check whether inventory exists for a SKU"""
    log_request(request, "Checking inventory existence")
    failure = validate(request, {"sku": sku}, [SKU_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "checkInventoryExists", "GET", join_path(sku, "exists"),
        success_message=f"Inventory existence check completed for SKU: {sku}",
    )


@router.get("/{sku}")
async def get_inventory(request: Request, sku: str, backend: BackendProxy = Depends(get_inventory_service)):
    log_request(request, "Getting inventory for SKU")
    failure = validate(request, {"sku": sku}, [SKU_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getInventoryBySku", "GET", join_path(sku),
        success_message=f"Inventory retrieved successfully for SKU: {sku}",
    )


@router.put("/{sku}")
async def update_inventory_quantity(
    request: Request,
    sku: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_inventory_service),
):
    """Set the stock quantity for a SKU"""
    payload = payload or {}
    log_request(request, "Updating inventory quantity", payload)
    failure = validate(request, {**payload, "sku": sku}, [SKU_RULE, QUANTITY_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "updateInventoryQuantity", "PUT", join_path(sku),
        json_body=payload,
        success_message=f"Inventory quantity updated successfully for SKU: {sku}",
    )
