"""Async client for the storefront backend REST API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as ModelError

from .config import get_settings
from .errors import NetworkError, ServerError
from .models import (
    Order,
    OrderCreate,
    Product,
    ProductCreate,
    Seller,
    SellerCreate,
    Stream,
    StreamCreate,
)

logger = logging.getLogger("livedrop.client")

M = TypeVar("M", bound=BaseModel)


class StorefrontClient:
    """Thin JSON wrapper over ``httpx.AsyncClient``.

    Every call raises :class:`NetworkError` when no response arrives and
    :class:`ServerError` for non-2xx statuses, with the response body text as
    the message.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout if timeout is not None else settings.request_timeout_secs,
            transport=transport,
        )

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body."""

        logger.debug("%s %s", method, path)
        try:
            resp = await self._http.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc) or f"Request failed: {type(exc).__name__}") from exc

        if not resp.is_success:
            text = resp.text.strip()
            logger.warning("%s %s -> %s", method, path, resp.status_code)
            raise ServerError(
                text or f"Request failed: {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ServerError(
                f"Invalid JSON response from {path}", status_code=resp.status_code
            ) from exc

    async def _one(self, model: type[M], method: str, path: str, **kwargs: Any) -> M:
        data = await self.request(method, path, **kwargs)
        try:
            return model.model_validate(data)
        except ModelError as exc:
            raise ServerError(f"Unexpected response from {path}: {exc}") from exc

    async def _many(self, model: type[M], path: str, **kwargs: Any) -> list[M]:
        data = await self.request("GET", path, **kwargs)
        if not isinstance(data, list):
            raise ServerError(f"Expected a list from {path}")
        try:
            return [model.model_validate(row) for row in data]
        except ModelError as exc:
            raise ServerError(f"Unexpected response from {path}: {exc}") from exc

    # sellers ---------------------------------------------------------------
    async def create_seller(self, data: SellerCreate) -> Seller:
        return await self._one(Seller, "POST", "/api/sellers", json=data.model_dump())

    async def list_sellers(self) -> list[Seller]:
        return await self._many(Seller, "/api/sellers")

    # products --------------------------------------------------------------
    async def create_product(self, data: ProductCreate) -> Product:
        return await self._one(Product, "POST", "/api/products", json=data.model_dump())

    async def list_products(self, seller_id: str | None = None) -> list[Product]:
        params = {"seller_id": seller_id} if seller_id else None
        return await self._many(Product, "/api/products", params=params)

    # streams ---------------------------------------------------------------
    async def create_stream(self, data: StreamCreate) -> Stream:
        return await self._one(Stream, "POST", "/api/streams", json=data.model_dump())

    async def list_streams(self, active: bool | None = None) -> list[Stream]:
        params = None if active is None else {"active": "true" if active else "false"}
        return await self._many(Stream, "/api/streams", params=params)

    async def get_stream(self, stream_id: str) -> Stream:
        return await self._one(Stream, "GET", f"/api/streams/{stream_id}")

    # orders ----------------------------------------------------------------
    async def create_order(self, data: OrderCreate) -> Order:
        return await self._one(Order, "POST", "/api/orders", json=data.to_payload())
