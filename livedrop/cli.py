"""Command line storefront.

Examples::

    livedrop demo
    livedrop stream --seller-id 1 --product-id 2 --discount 25 --duration 300
    livedrop watch 3 --polls 5
    livedrop order --product-id 2 --stream-id 3 --quantity 2
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

from dotenv import load_dotenv

from .client import StorefrontClient
from .config import get_settings
from .discount_window import evaluate
from .models import ProductCreate, SellerCreate, StreamCreate, build
from .notify import ConsoleNotifier, present
from .obs.logging import configure_logging
from .orders import OrderSubmitter, build_order
from .storefront import (
    BuyerCheckout,
    StorefrontSession,
    order_placed_message,
    render_stream,
)

FIRST_SNAPSHOT_TIMEOUT = 10.0


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="livedrop", description="Live drop storefront")
    parser.add_argument("--backend-url", help="Backend base URL (default: BACKEND_URL)")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sellers", help="List sellers")
    p = sub.add_parser("seller", help="Create a seller")
    p.add_argument("--name", default="Demo Seller")
    p.add_argument("--email", default="seller@example.com")

    p = sub.add_parser("products", help="List products")
    p.add_argument("--seller-id")
    p = sub.add_parser("product", help="Create a product")
    p.add_argument("--seller-id", required=True)
    p.add_argument("--title", default="T-Shirt")
    p.add_argument("--price", type=float, default=20)

    p = sub.add_parser("streams", help="List streams")
    state = p.add_mutually_exclusive_group()
    state.add_argument("--active", dest="active", action="store_true", default=None)
    state.add_argument("--inactive", dest="active", action="store_false", default=None)
    p = sub.add_parser("stream", help="Start a discount stream")
    p.add_argument("--seller-id", required=True)
    p.add_argument("--product-id", required=True, action="append", dest="product_ids")
    p.add_argument("--discount", type=float, default=25)
    p.add_argument("--duration", type=int, default=300, help="Seconds")
    p.add_argument("--title", default="Live Drop")

    p = sub.add_parser("watch", help="Poll a stream and print its countdown")
    p.add_argument("stream_id")
    p.add_argument("--polls", type=int, default=0, help="Stop after N updates")

    p = sub.add_parser("order", help="Buy with the live discount")
    p.add_argument("--product-id", required=True)
    p.add_argument("--stream-id", required=True)
    p.add_argument("--name", default="Jane Doe")
    p.add_argument("--email", default="jane@example.com")
    p.add_argument("--quantity", type=int, default=1)

    p = sub.add_parser("demo", help="Seller, product, stream and order in one go")
    p.add_argument("--price", type=float, default=20)
    p.add_argument("--discount", type=float, default=25)
    p.add_argument("--duration", type=int, default=300)
    p.add_argument("--quantity", type=int, default=1)
    return parser


def _print_rows(rows) -> None:
    for row in rows:
        print(row.model_dump_json())


async def _watch(client: StorefrontClient, stream_id: str, polls: int) -> None:
    updates: asyncio.Queue = asyncio.Queue()
    checkout = BuyerCheckout(client, on_update=updates.put_nowait)
    checkout.follow(stream_id)
    seen = 0
    try:
        while True:
            snapshot = await updates.get()
            seen += 1
            print(" | ".join(checkout.banner()))
            if polls and seen >= polls:
                break
            if not polls and not snapshot.active:
                break
    finally:
        await checkout.aclose()


async def _order(client: StorefrontClient, args: argparse.Namespace) -> None:
    order = build_order(args.name, args.email, args.product_id, args.quantity, args.stream_id)
    stream = await client.get_stream(args.stream_id)
    window = evaluate(stream)
    created = await OrderSubmitter(client).submit(order, eligible=window.eligible)
    print(order_placed_message(created))


async def _demo(client: StorefrontClient, notifier: ConsoleNotifier, args) -> None:
    first = asyncio.Event()
    async with StorefrontSession(
        client, notifier, on_update=lambda _snapshot: first.set()
    ) as session:
        if await session.create_seller() is None:
            return
        if await session.create_product(price=args.price) is None:
            return
        if await session.start_stream(args.discount, args.duration) is None:
            return
        try:
            await asyncio.wait_for(first.wait(), FIRST_SNAPSHOT_TIMEOUT)
        except asyncio.TimeoutError:
            notifier.error("Stream status unavailable")
            return
        for line in session.checkout.banner():
            notifier.info(line)
        await session.place_order(quantity=args.quantity)


async def _run(args: argparse.Namespace, notifier: ConsoleNotifier) -> None:
    async with StorefrontClient(args.backend_url) as client:
        cmd = args.command
        if cmd == "sellers":
            _print_rows(await client.list_sellers())
        elif cmd == "seller":
            seller = await client.create_seller(
                build(SellerCreate, name=args.name, email=args.email)
            )
            print(seller.id)
        elif cmd == "products":
            _print_rows(await client.list_products(args.seller_id))
        elif cmd == "product":
            product = await client.create_product(
                build(ProductCreate, title=args.title, price=args.price, seller_id=args.seller_id)
            )
            print(product.id)
        elif cmd == "streams":
            _print_rows(await client.list_streams(args.active))
        elif cmd == "stream":
            stream = await client.create_stream(
                build(
                    StreamCreate,
                    seller_id=args.seller_id,
                    product_ids=args.product_ids,
                    discount_percent=args.discount,
                    duration_seconds=args.duration,
                    title=args.title,
                )
            )
            print(stream.id)
            print(" | ".join(render_stream(stream, evaluate(stream))))
        elif cmd == "watch":
            await _watch(client, args.stream_id, args.polls)
        elif cmd == "order":
            await _order(client, args)
        elif cmd == "demo":
            await _demo(client, notifier, args)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``livedrop`` console script."""

    load_dotenv()  # load environment variables from a .env file
    get_settings.cache_clear()
    settings = get_settings()

    args = _parser().parse_args(argv)
    configure_logging(args.log_level or settings.log_level, json_output=settings.log_json)

    notifier = ConsoleNotifier()
    try:
        asyncio.run(present(_run(args, notifier), notifier))
    except KeyboardInterrupt:
        return 130
    return 1 if notifier.failures else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
