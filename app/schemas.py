from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictStr

# Request bodies are decoded strictly: "9.99" is not a price and 5 is not a name.
# Business rules (non-empty name, price >= 0) live in app.validation.


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    price: Optional[StrictFloat] = None


class ProductUpdate(BaseModel):
    """Partial update body: a missing key (or null) leaves the field untouched."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    price: Optional[StrictFloat] = None


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: float
    created_at: datetime
    updated_at: datetime


class ProductEnvelope(BaseModel):
    message: str
    product: ProductRead


class ProductPage(BaseModel):
    data: list[ProductRead]
    total: int
    page: int
    limit: int


class MessageResponse(BaseModel):
    message: str
