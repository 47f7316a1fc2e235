"""Order submission gated on stream eligibility."""

from __future__ import annotations

import logging

from .client import StorefrontClient
from .errors import NetworkError, NotEligible, ServerError, SubmissionFailed, ValidationError
from .models import Order, OrderCreate, build

logger = logging.getLogger("livedrop.orders")

GENERIC_FAILURE = "Order submission failed"


def build_order(
    buyer_name: str,
    buyer_email: str,
    product_id: str | None,
    quantity: int = 1,
    stream_id: str | None = None,
) -> OrderCreate:
    """Validate purchase input locally, raising :class:`ValidationError`."""
    if not product_id:
        raise ValidationError("Create a product first")
    return build(
        OrderCreate,
        buyer_name=buyer_name,
        buyer_email=buyer_email,
        product_id=product_id,
        quantity=quantity,
        stream_id=stream_id or None,
    )


class OrderSubmitter:
    """Submit purchases; a failed purchase is never retried automatically."""

    def __init__(self, client: StorefrontClient) -> None:
        self.client = client

    async def submit(self, order: OrderCreate, *, eligible: bool) -> Order:
        """Create ``order`` and return the server's copy with ``total_price``.

        ``eligible`` must be evaluated by the caller right before this call.
        """
        if not eligible:
            raise NotEligible()
        try:
            created = await self.client.create_order(order)
        except (NetworkError, ServerError) as exc:
            status = getattr(exc, "status_code", None)
            logger.warning("order for product %s failed: %s", order.product_id, exc)
            raise SubmissionFailed(exc.message or GENERIC_FAILURE, status_code=status) from exc
        logger.info(
            "order %s placed for product %s total=%s",
            created.id,
            order.product_id,
            created.total_price,
        )
        return created
