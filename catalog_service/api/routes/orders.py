from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, status

from catalog_service.api.dependencies import get_order_reconciler, get_order_service
from catalog_service.core.logging import get_logger
from catalog_service.domain.schemas.order import OrderSubmission
from catalog_service.domain.schemas.responses import success_response
from catalog_service.services import OrderReconciler, OrderService

router = APIRouter(prefix="/orders", tags=["orders"])
logger = get_logger(__name__)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Submit an order",
    response_description="Persisted order and per-item fulfillment outcome"
)
def submit_order(
    submission: OrderSubmission,
    reconciler: OrderReconciler = Depends(get_order_reconciler)
) -> Dict[str, Any]:
    """
    Submit an outgoing (sale) or incoming (restock) order.

    Each product's inventory is reconciled against the requested quantity and
    the product is reported as fulfilled, partial or unfulfilled. Fails with
    409 and persists nothing when no item could be fulfilled.
    """
    logger.info(f"Submitting order with {len(submission.order_details)} items")
    result = reconciler.submit(submission.to_request())
    return success_response(result.to_dict())


@router.get(
    "/{order_id}",
    summary="Get an order"
)
def get_order(
    order_id: str = Path(..., description="Order ID"),
    order_service: OrderService = Depends(get_order_service)
) -> Dict[str, Any]:
    """Gets order by ID."""
    order = order_service.get_order(order_id)
    return success_response(order.to_dict())
