"""Wire models for the storefront REST contract."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as ModelError

from .errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def build(model: type[M], **data: Any) -> M:
    """Instantiate a request model, raising :class:`ValidationError` on bad input."""
    try:
        return model(**data)
    except ModelError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in exc.errors() if err["loc"]
        )
        raise ValidationError(f"Invalid {model.__name__}: {fields or exc}") from exc


class Resource(BaseModel):
    """Base for server resources; unknown fields are kept, ids are strings."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str


class Seller(Resource):
    name: Optional[str] = None
    email: Optional[str] = None


class Product(Resource):
    title: Optional[str] = None
    price: Optional[float] = None
    seller_id: Optional[str] = None
    in_stock: Optional[bool] = None


class Stream(Resource):
    """Snapshot of a discount stream as last reported by the server."""

    title: Optional[str] = None
    discount_percent: Optional[float] = None
    end_time: Optional[datetime] = None
    active: bool = False

    @field_validator("end_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Order(Resource):
    """A created order. ``total_price`` is displayed exactly as received."""

    total_price: Union[int, float, None] = None
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    stream_id: Optional[str] = None


class SellerCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Demo Seller"])
    email: str = Field(..., examples=["seller@example.com"])


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, examples=["T-Shirt"])
    price: float = Field(..., ge=0, examples=[20])
    seller_id: str
    in_stock: bool = True


class StreamCreate(BaseModel):
    seller_id: str
    product_ids: list[str] = Field(..., min_length=1)
    discount_percent: float = Field(..., ge=0, le=100, examples=[25])
    duration_seconds: int = Field(..., gt=0, examples=[300])
    title: str = "Live Drop"


class OrderCreate(BaseModel):
    """Purchase request body; ``stream_id`` is left out when not set."""

    buyer_name: str = Field(..., min_length=1, examples=["Jane Doe"])
    buyer_email: str = Field(..., examples=["jane@example.com"])
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    stream_id: Optional[str] = None

    @field_validator("buyer_name", "product_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
