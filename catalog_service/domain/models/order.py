from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

Quantity = Union[int, float]


class UnfulfilledReason(str, Enum):
    """Why a line item ended up unfulfilled."""
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    # Conditional update modified nothing: either a concurrent writer changed
    # the inventory first, or the planned change was a no-op. Not distinguished.
    UPDATE_NOT_APPLIED = "update_not_applied"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class LineItem:
    """A product and the quantity actually applied to its inventory."""

    product_id: str
    quantity: Quantity

    def to_dict(self) -> Dict[str, Quantity]:
        return {self.product_id: self.quantity}


@dataclass
class Order:
    """
    Domain model for an order.

    Orders are immutable once persisted and only ever created as the output
    of one reconciliation run.
    """

    is_outgoing: bool
    line_items: List[LineItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation of the order."""
        data = {
            "isOutgoing": self.is_outgoing,
            "orderDetails": [item.to_dict() for item in self.line_items],
            "datetime": self.created_at.isoformat(),
        }
        if self.id is not None:
            data["_id"] = self.id
        return data


@dataclass
class ReconciliationResult:
    """Outcome of reconciling one order request against the catalog."""

    order: Order
    fulfilled: List[str] = field(default_factory=list)
    partial: List[str] = field(default_factory=list)
    unfulfilled: List[str] = field(default_factory=list)
    reasons: Dict[str, UnfulfilledReason] = field(default_factory=dict)

    @property
    def order_id(self) -> Optional[str]:
        return self.order.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderID": self.order_id,
            "orderDetails": self.order.to_dict(),
            "fulfilled": list(self.fulfilled),
            "partial": list(self.partial),
            "unfulfilled": list(self.unfulfilled),
        }


@dataclass(frozen=True)
class ReconciliationRequest:
    """Validated order submission: direction plus requested quantities."""

    is_outgoing: bool
    quantities: Dict[str, Quantity]
