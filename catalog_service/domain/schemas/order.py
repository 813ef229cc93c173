import math
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, field_validator

from catalog_service.domain.models.order import Quantity, ReconciliationRequest

# Largest value BSON can store as an integer
MAX_QUANTITY = 2**63 - 1


class OrderSubmission(BaseModel):
    """
    Body of an order submission.

    Parsing this model is the only validation an order goes through before
    reconciliation: once constructed, the direction is a real boolean, the
    details mapping is non-empty and every quantity is a whole number that
    fits a 64-bit signed integer.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_outgoing: StrictBool = Field(..., alias="isOutgoing", description="True for a sale, false for a restock")
    order_details: Dict[str, Union[StrictInt, StrictFloat]] = Field(
        ...,
        alias="orderDetails",
        min_length=1,
        description="Product ID to requested quantity"
    )

    @field_validator("order_details")
    @classmethod
    def validate_quantities(cls, v: Dict[str, Quantity]) -> Dict[str, int]:
        """Reject blank product IDs and quantities that are not finite whole numbers."""
        parsed = {}
        for product_id, quantity in v.items():
            if not product_id.strip():
                raise ValueError("product IDs must be non-empty strings")
            if isinstance(quantity, float):
                if not math.isfinite(quantity) or not quantity.is_integer():
                    raise ValueError(f"quantity for {product_id} must be a whole number")
                quantity = int(quantity)
            if abs(quantity) > MAX_QUANTITY:
                raise ValueError(f"quantity for {product_id} is out of range")
            parsed[product_id] = quantity
        return parsed

    def to_request(self) -> ReconciliationRequest:
        return ReconciliationRequest(
            is_outgoing=self.is_outgoing,
            quantities=dict(self.order_details)
        )
