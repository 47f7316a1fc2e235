"""Live drop storefront client."""

from .client import StorefrontClient
from .discount_window import DiscountWindow, evaluate
from .errors import (
    NetworkError,
    NotEligible,
    ServerError,
    StorefrontError,
    SubmissionFailed,
    ValidationError,
)
from .orders import OrderSubmitter
from .poller import StreamStatusPoller, StreamSubscription
from .storefront import BuyerCheckout, StorefrontSession

__all__ = [
    "BuyerCheckout",
    "DiscountWindow",
    "NetworkError",
    "NotEligible",
    "OrderSubmitter",
    "ServerError",
    "StorefrontClient",
    "StorefrontError",
    "StorefrontSession",
    "StreamStatusPoller",
    "StreamSubscription",
    "SubmissionFailed",
    "ValidationError",
    "evaluate",
]
