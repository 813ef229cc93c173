from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator


class ProductCreate(BaseModel):
    """Schema for creating a new product."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique product name")
    description: str = Field(default="", description="Product description")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    inventory: StrictInt = Field(default=0, ge=0, description="Units in stock")


class ProductUpdate(BaseModel):
    """Schema for updating a product. Only provided fields are changed."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    inventory: Optional[StrictInt] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_not_empty(self) -> "ProductUpdate":
        if not self.model_dump(exclude_none=True):
            raise ValueError("at least one field must be provided")
        return self
