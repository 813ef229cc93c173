import math
from dataclasses import dataclass
from numbers import Real
from typing import Mapping, Optional

from catalog_service.core.exceptions import (
    InvalidInputError,
    NoFulfillmentError,
    RepositoryError,
    StoreUnavailableError,
)
from catalog_service.core.logging import get_logger, log_data
from catalog_service.domain.interfaces.repository_interface import (
    OrderStoreInterface,
    ProductStoreInterface,
)
from catalog_service.domain.models.order import (
    LineItem,
    Order,
    Quantity,
    ReconciliationRequest,
    ReconciliationResult,
    UnfulfilledReason,
)
from catalog_service.domain.models.product import Product

logger = get_logger(__name__)

FULFILLED = "fulfilled"
PARTIAL = "partial"


@dataclass(frozen=True)
class PlannedAdjustment:
    """Inventory change planned for one line item, pending the conditional write."""

    outcome: str
    expected: int
    updated: int
    applied: Quantity


def plan_adjustment(product: Product, requested: Quantity, is_outgoing: bool) -> Optional[PlannedAdjustment]:
    """
    Decide what a line item does to a product's inventory.

    Returns None when nothing can be applied (outgoing with no stock).
    Outgoing requests larger than the stock consume all of it and record the
    stock actually taken. Incoming requests are always applied in full.
    """
    current = product.inventory

    if not is_outgoing:
        return PlannedAdjustment(FULFILLED, current, current + requested, requested)

    if current == 0:
        return None
    if current < requested:
        return PlannedAdjustment(PARTIAL, current, 0, current)
    return PlannedAdjustment(FULFILLED, current, current - requested, requested)


class OrderReconciler:
    """
    Applies an order to the catalog one line item at a time.

    Every item is read, planned and written with a conditional update keyed
    on the inventory value that was read. Items whose write modifies nothing
    are demoted to unfulfilled; there is no retry and no cross-item
    transaction. Exactly one order is persisted when at least one item is
    fulfilled or partially fulfilled.
    """

    def __init__(self, products: ProductStoreInterface, orders: OrderStoreInterface):
        self.products = products
        self.orders = orders

    def submit(self, request: ReconciliationRequest) -> ReconciliationResult:
        return self.reconcile(request.is_outgoing, request.quantities)

    def reconcile(self, is_outgoing: bool, requested: Mapping[str, Quantity]) -> ReconciliationResult:
        """
        Reconcile requested quantities against inventory and persist the order.

        Args:
            is_outgoing: True to deplete stock (sale), False to restock
            requested: Product ID to requested quantity, processed in iteration order

        Returns:
            ReconciliationResult with the persisted order and the three buckets

        Raises:
            InvalidInputError: If the request is empty or a quantity is not a number
            NoFulfillmentError: If every item ended up unfulfilled
            StoreUnavailableError: If the database could not be reached
        """
        self._validate(is_outgoing, requested)

        result = ReconciliationResult(order=Order(is_outgoing=is_outgoing))

        for product_id, quantity in requested.items():
            if quantity <= 0:
                # Passed through unchanged
                logger.warning(
                    f"Non-positive quantity requested for product {product_id}",
                    extra=log_data(product_id=product_id, quantity=quantity)
                )

            outcome, line_item, reason = self._reconcile_item(product_id, quantity, is_outgoing)

            if outcome == FULFILLED:
                result.fulfilled.append(product_id)
            elif outcome == PARTIAL:
                result.partial.append(product_id)
            else:
                result.unfulfilled.append(product_id)
                result.reasons[product_id] = reason

            if line_item is not None:
                result.order.line_items.append(line_item)

        if not result.order.line_items:
            logger.info(
                "Order rejected, no item could be fulfilled",
                extra=log_data(
                    unfulfilled=result.unfulfilled,
                    reasons={k: v.value for k, v in result.reasons.items()}
                )
            )
            raise NoFulfillmentError(unfulfilled=result.unfulfilled)

        result.order.id = self.orders.insert(result.order)

        logger.info(
            f"Order {result.order.id} reconciled",
            extra=log_data(
                is_outgoing=is_outgoing,
                fulfilled=len(result.fulfilled),
                partial=len(result.partial),
                unfulfilled=len(result.unfulfilled)
            )
        )
        return result

    def _validate(self, is_outgoing: bool, requested: Mapping[str, Quantity]) -> None:
        if not isinstance(is_outgoing, bool):
            raise InvalidInputError("isOutgoing must be a boolean", field="isOutgoing")
        if not requested:
            raise InvalidInputError("orderDetails must contain at least one item", field="orderDetails")
        for product_id, quantity in requested.items():
            if isinstance(quantity, bool) or not isinstance(quantity, Real) or not math.isfinite(quantity):
                raise InvalidInputError(
                    f"Quantity for product {product_id} is not a number",
                    field="orderDetails"
                )

    def _reconcile_item(self, product_id: str, quantity: Quantity, is_outgoing: bool):
        """Returns (outcome, line item or None, unfulfilled reason or None)."""
        try:
            product = self.products.find_by_id(product_id)
        except StoreUnavailableError:
            raise
        except RepositoryError as e:
            logger.warning(f"Lookup failed for product {product_id}: {e.detail}")
            return None, None, UnfulfilledReason.STORE_ERROR

        if product is None:
            logger.debug(f"Product {product_id} not found")
            return None, None, UnfulfilledReason.NOT_FOUND

        plan = plan_adjustment(product, quantity, is_outgoing)
        if plan is None:
            logger.debug(f"Product {product_id} is out of stock")
            return None, None, UnfulfilledReason.OUT_OF_STOCK

        try:
            modified = self.products.adjust_inventory(product_id, plan.expected, plan.updated)
        except StoreUnavailableError:
            raise
        except RepositoryError as e:
            logger.warning(f"Inventory update failed for product {product_id}: {e.detail}")
            return None, None, UnfulfilledReason.STORE_ERROR

        if modified == 0:
            logger.warning(
                f"Inventory update for product {product_id} was not applied",
                extra=log_data(product_id=product_id, expected=plan.expected, updated=plan.updated)
            )
            return None, None, UnfulfilledReason.UPDATE_NOT_APPLIED

        logger.debug(
            f"Product {product_id} {plan.outcome}",
            extra=log_data(product_id=product_id, applied=plan.applied, inventory=plan.updated)
        )
        return plan.outcome, LineItem(product_id=product_id, quantity=plan.applied), None
