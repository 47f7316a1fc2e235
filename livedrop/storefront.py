"""Seller, product and stream setup plus the buyer checkout panel."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from .client import StorefrontClient
from .discount_window import DiscountWindow, evaluate
from .errors import ValidationError
from .models import Order, ProductCreate, SellerCreate, Stream, StreamCreate, build
from .notify import Notifier, present
from .orders import OrderSubmitter, build_order
from .poller import StreamStatusPoller

logger = logging.getLogger("livedrop.storefront")


def format_number(value: float | int | None) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def order_placed_message(order: Order) -> str:
    """Confirmation text; the server total is shown as sent, without a trailing .0."""
    return f"Order placed! Total: ${format_number(order.total_price)}"


def render_stream(stream: Stream | None, window: DiscountWindow) -> list[str]:
    """Return the status banner lines for the buyer panel."""
    if stream is None:
        return ["Waiting for stream..."]
    mark = "✅" if stream.active else "❌"
    lines = [f"Live now: {stream.title or 'Untitled'} {mark}"]
    discount = f"Discount: {format_number(stream.discount_percent)}%"
    if window.remaining_seconds is not None:
        discount += f" (ends in {window.remaining_seconds}s)"
    lines.append(discount)
    return lines


class BuyerCheckout:
    """Buyer panel: follows one stream and places discounted orders.

    ``stream`` is the snapshot cell. Only the current poll subscription's
    callback writes it.
    """

    def __init__(
        self,
        client: StorefrontClient,
        *,
        product_id: str | None = None,
        poll_interval: float | None = None,
        on_update: Callable[[Stream], None] | None = None,
    ) -> None:
        self.client = client
        self.product_id = product_id
        self.stream_id: str | None = None
        self.stream: Stream | None = None
        self._on_update = on_update
        self._submitter = OrderSubmitter(client)
        self._poller = StreamStatusPoller(client.get_stream, self._apply, poll_interval)

    def _apply(self, snapshot: Stream) -> None:
        self.stream = snapshot
        if self._on_update is not None:
            self._on_update(snapshot)

    def follow(self, stream_id: str | None) -> None:
        """Switch the panel to ``stream_id``; an empty id stops polling."""
        stream_id = stream_id or None
        if stream_id != self.stream_id:
            # a snapshot of another stream must not gate this one
            self.stream = None
        self.stream_id = stream_id
        self._poller.watch(self.stream_id)

    async def refresh(self) -> bool:
        sub = self._poller.subscription
        return await sub.refresh() if sub is not None else False

    def window(self, now: datetime | None = None) -> DiscountWindow:
        return evaluate(self.stream, now)

    def banner(self, now: datetime | None = None) -> list[str]:
        return render_stream(self.stream, self.window(now))

    async def place_order(
        self,
        buyer_name: str = "Jane Doe",
        buyer_email: str = "jane@example.com",
        quantity: int = 1,
    ) -> Order:
        order = build_order(
            buyer_name, buyer_email, self.product_id, quantity, self.stream_id
        )
        # re-evaluated here, never taken from an earlier render
        window = self.window()
        return await self._submitter.submit(order, eligible=window.eligible)

    async def aclose(self) -> None:
        await self._poller.aclose()


class StorefrontSession:
    """State of one storefront page: seller, product and stream ids."""

    def __init__(
        self,
        client: StorefrontClient,
        notifier: Notifier,
        *,
        poll_interval: float | None = None,
        on_update: Callable[[Stream], None] | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.seller_id: str | None = None
        self.product_id: str | None = None
        self.stream_id: str | None = None
        self.checkout = BuyerCheckout(
            client, poll_interval=poll_interval, on_update=on_update
        )

    async def __aenter__(self) -> "StorefrontSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.checkout.aclose()

    async def _create_seller(self, name: str, email: str) -> str:
        seller = await self.client.create_seller(build(SellerCreate, name=name, email=email))
        self.seller_id = seller.id
        logger.info("seller %s created", seller.id)
        return seller.id

    async def _create_product(self, title: str, price: float) -> str:
        if not self.seller_id:
            raise ValidationError("Create a seller first")
        product = await self.client.create_product(
            build(ProductCreate, title=title, price=price, seller_id=self.seller_id)
        )
        self.product_id = product.id
        self.checkout.product_id = product.id
        logger.info("product %s created", product.id)
        return product.id

    async def _start_stream(
        self, discount_percent: float, duration_seconds: int, title: str
    ) -> str:
        if not self.seller_id or not self.product_id:
            raise ValidationError("Create seller and product first")
        stream = await self.client.create_stream(
            build(
                StreamCreate,
                seller_id=self.seller_id,
                product_ids=[self.product_id],
                discount_percent=discount_percent,
                duration_seconds=duration_seconds,
                title=title,
            )
        )
        self.stream_id = stream.id
        self.checkout.follow(stream.id)
        logger.info("stream %s started for %ss", stream.id, duration_seconds)
        return stream.id

    async def _place_order(self, buyer_name: str, buyer_email: str, quantity: int) -> Order:
        order = await self.checkout.place_order(buyer_name, buyer_email, quantity)
        self.notifier.info(order_placed_message(order))
        return order

    async def create_seller(
        self, name: str = "Demo Seller", email: str = "seller@example.com"
    ) -> str | None:
        return await present(self._create_seller(name, email), self.notifier)

    async def create_product(self, title: str = "T-Shirt", price: float = 20) -> str | None:
        return await present(self._create_product(title, price), self.notifier)

    async def start_stream(
        self,
        discount_percent: float = 25,
        duration_seconds: int = 300,
        title: str = "Live Drop",
    ) -> str | None:
        return await present(
            self._start_stream(discount_percent, duration_seconds, title), self.notifier
        )

    async def place_order(
        self,
        buyer_name: str = "Jane Doe",
        buyer_email: str = "jane@example.com",
        quantity: int = 1,
    ) -> Order | None:
        return await present(
            self._place_order(buyer_name, buyer_email, quantity), self.notifier
        )
