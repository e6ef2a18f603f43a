from fastapi import APIRouter, Depends, Response, status
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_order_workflow
from api.errors import to_error_response
from models.errors import OrderErrors
from models.order import CreateOrderRequest, ErrorResponse, OrderResponse, ValidationErrorResponse
from workflows.order_workflow import OrderWorkflow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OrderResponse, responses={
    400: {"model": ValidationErrorResponse, "description": "Invalid request"},
    409: {"model": ErrorResponse, "description": "An order with this external id already exists"},
})
async def create_order(
    request: CreateOrderRequest,
    response: Response,
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    """Receives an order from the source system, taxes it and stores it."""
    logger.info(f"Creating order with external_id: {request.external_id}")
    result = await workflow.create_order(request.external_id, request.items)
    if result.is_failure:
        return to_error_response(result.error)

    order = result.value
    logger.info(f"Order created successfully. id: {order.id}, tax_amount: {order.tax_amount}")
    response.headers["Location"] = f"/api/orders/{order.id}"
    return OrderResponse.from_order(order)


@router.get("", response_model=List[OrderResponse])
async def list_orders(workflow: OrderWorkflow = Depends(get_order_workflow)):
    orders = await workflow.list_all_orders()
    return [OrderResponse.from_order(order) for order in orders]


@router.get("/processed", response_model=List[OrderResponse])
async def list_processed_orders(workflow: OrderWorkflow = Depends(get_order_workflow)):
    """Orders ready for the consumer system."""
    logger.info("Retrieving processed orders")
    orders = await workflow.list_processed_orders()
    return [OrderResponse.from_order(order) for order in orders]


@router.get("/external/{external_id}", response_model=OrderResponse, responses={
    404: {"model": ErrorResponse, "description": "Order not found"},
})
async def get_order_by_external_id(external_id: str, workflow: OrderWorkflow = Depends(get_order_workflow)):
    result = await workflow.get_order_by_external_id(external_id)
    if result.is_failure:
        return to_error_response(result.error)
    return OrderResponse.from_order(result.value)


@router.get("/{order_id}", response_model=OrderResponse, responses={
    404: {"model": ErrorResponse, "description": "Order not found"},
})
async def get_order(order_id: str, workflow: OrderWorkflow = Depends(get_order_workflow)):
    try:
        parsed_id = UUID(order_id)
    except ValueError:
        # Not an order id at all, so no such order
        return to_error_response(OrderErrors.not_found(order_id))
    result = await workflow.get_order_by_id(parsed_id)
    if result.is_failure:
        return to_error_response(result.error)
    return OrderResponse.from_order(result.value)
