"""
Cart routes, forwarded to the order service
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from bff_service.config import ORDER_SERVICE
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
    is_positive_number,
    is_present,
    is_valid_cart_id,
    is_valid_customer_id,
    is_valid_sku_code,
    validation_message,
)

router = APIRouter()

get_order_service = backend_dependency(ORDER_SERVICE)

CART_ID_RULE = ValidationRule(
    "cartId", is_valid_cart_id, validation_message("Cart ID", "must be a positive number")
)
CUSTOMER_ID_RULE = ValidationRule(
    "customerId", is_valid_customer_id,
    validation_message("Customer ID", "must be between 1 and 50 characters"),
)
SKU_CODE_RULE = ValidationRule(
    "skuCode", is_valid_sku_code, validation_message("SKU Code", "must be between 2 and 50 characters")
)


@router.get("/health")
async def order_service_health(backend: BackendProxy = Depends(get_order_service)):
    """Proxy to the order service health check"""
    return await backend_health(backend, "Order")


@router.get("/customer/{customer_id}")
async def get_cart_by_customer(
    request: Request,
    customer_id: str,
    backend: BackendProxy = Depends(get_order_service),
):
    """Get the cart belonging to a customer"""
    log_request(request, "Retrieving cart for customer")
    failure = validate(request, {"customerId": customer_id}, [CUSTOMER_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getCartByCustomerId", "GET", join_path("customer", customer_id),
        success_message=f"Cart retrieved successfully for customer: {customer_id}",
    )


@router.post("")
async def create_cart(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_order_service),
):
    """Create a new cart for a customer"""
    payload = payload or {}
    log_request(request, "Creating cart for customer", payload)
    rules = [
        ValidationRule("customerId", is_present, "Customer ID is required"),
        CUSTOMER_ID_RULE,
    ]
    failure = validate(request, payload, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "createCart", "POST",
        json_body=payload,
        success_status=201,
        success_message=f"Cart created successfully for customer: {payload['customerId']}",
    )


@router.get("/{cart_id}")
async def get_cart(request: Request, cart_id: str, backend: BackendProxy = Depends(get_order_service)):
    """Get cart by ID"""
    log_request(request, "Retrieving cart")
    failure = validate(request, {"cartId": cart_id}, [CART_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "getCartById", "GET", join_path(cart_id.strip()),
        success_message="Cart retrieved successfully",
    )


@router.post("/{cart_id}")
async def add_item_to_cart(
    request: Request,
    cart_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    backend: BackendProxy = Depends(get_order_service),
):
    """Add an item to a cart"""
    payload = payload or {}
    log_request(request, "Adding item to cart", payload)
    rules = [
        CART_ID_RULE,
        ValidationRule("skuCode", is_present, "SKU code is required"),
        SKU_CODE_RULE,
        ValidationRule("quantity", is_positive_number, "Quantity must be a positive number"),
    ]
    failure = validate(request, {**payload, "cartId": cart_id}, rules)
    if failure is not None:
        return failure

    return await forward(
        request, backend, "addItemToCart", "POST", join_path(cart_id.strip()),
        json_body=payload,
        success_message="Item added to cart successfully",
    )


@router.delete("/{cart_id}/{sku_code}")
async def remove_item_from_cart(
    request: Request,
    cart_id: str,
    sku_code: str,
    backend: BackendProxy = Depends(get_order_service),
):
    """Remove one item from a cart"""
    log_request(request, "Removing item from cart")
    failure = validate(request, {"cartId": cart_id, "skuCode": sku_code}, [CART_ID_RULE, SKU_CODE_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "removeItemFromCart", "DELETE", join_path(cart_id.strip(), sku_code),
        success_status=204,
        success_message="Item removed from cart successfully",
    )


@router.delete("/{cart_id}")
async def remove_cart(request: Request, cart_id: str, backend: BackendProxy = Depends(get_order_service)):
    """Remove a cart"""
    log_request(request, "Removing cart")
    failure = validate(request, {"cartId": cart_id}, [CART_ID_RULE])
    if failure is not None:
        return failure

    return await forward(
        request, backend, "removeCart", "DELETE", join_path(cart_id.strip()),
        success_status=204,
        success_message="Cart removed successfully",
    )
