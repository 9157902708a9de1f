"""Report delivery."""

from .channel import ENDPOINT_ENV_VAR, DeliveryChannel, HttpTransport, resolve_endpoint
from .ledger import DeliveryLedger, DeliveryRecord

__all__ = [
    "ENDPOINT_ENV_VAR",
    "DeliveryChannel",
    "HttpTransport",
    "resolve_endpoint",
    "DeliveryLedger",
    "DeliveryRecord",
]
