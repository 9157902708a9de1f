"""Fire-and-forget delivery of metric reports to the collection endpoint."""

import logging
import os
from typing import Any, Dict, Optional

import requests
import simpy

from ..reports.models import MetricReport
from .ledger import DeliveryLedger, DeliveryRecord

logger = logging.getLogger(__name__)

ENDPOINT_ENV_VAR = "RUM_ENDPOINT"


def resolve_endpoint(explicit: Optional[str] = None) -> Optional[str]:
    """Return ``explicit`` if given, otherwise the ``RUM_ENDPOINT`` environment value."""
    return explicit or os.environ.get(ENDPOINT_ENV_VAR) or None


class HttpTransport:
    """Sends one JSON body per request with HTTP PUT."""

    def __init__(self, session: Optional[requests.Session] = None, timeout_s: Optional[float] = None):
        self.session = session or requests.Session()
        self.timeout_s = timeout_s

    def put(self, url: str, body: Dict[str, Any]) -> int:
        """PUT ``body`` to ``url`` and return the status code.

        Raises:
            requests.RequestException: On connection failures and non-2xx responses.
        """
        response = self.session.put(url, json=body, timeout=self.timeout_s)
        response.raise_for_status()
        return response.status_code


class DeliveryChannel:
    """Transmits each report in its own detached page-loop process.

    ``deliver`` returns immediately; callers never wait on the outcome.
    Any error raised by the transport is logged and recorded in the ledger,
    never raised into the page loop.
    """

    def __init__(
        self,
        simpy_env: simpy.Environment,
        endpoint: str,
        transport: Optional[Any] = None,
        ledger: Optional[DeliveryLedger] = None,
        delivery_latency_s: float = 0.0,
        retry_attempts: int = 0,
    ):
        """Initialize the delivery channel.

        Args:
            simpy_env: Page event loop the delivery processes run on
            endpoint: Collection endpoint URL
            transport: Object with ``put(url, body) -> status_code``; defaults to HttpTransport
            ledger: Delivery ledger; a new one is created when omitted
            delivery_latency_s: Simulated network latency before each attempt
            retry_attempts: Extra attempts after a failure (0 disables retries)
        """
        if not endpoint:
            raise ValueError("A collection endpoint is required")
        if retry_attempts < 0:
            raise ValueError(f"Invalid retry_attempts: {retry_attempts}")

        self.simpy_env = simpy_env
        self.endpoint = endpoint
        self.transport = transport or HttpTransport()
        self.ledger = ledger or DeliveryLedger()
        self.delivery_latency_s = delivery_latency_s
        self.retry_attempts = retry_attempts

        logger.info(f"DeliveryChannel initialized for {endpoint}")

    def deliver(self, report: MetricReport) -> simpy.Process:
        """Serialize ``report`` and schedule its transmission."""
        payload = report.to_dict()
        logger.debug(f"Dispatching report: {payload}")

        record = self.ledger.log_dispatch(report.name, self.simpy_env.now)
        return self.simpy_env.process(self._transmit({"metric": payload}, record))

    def _transmit(self, body: Dict[str, Any], record: DeliveryRecord):
        for attempt in range(1 + self.retry_attempts):
            if self.delivery_latency_s > 0:
                yield self.simpy_env.timeout(self.delivery_latency_s)

            self.ledger.log_attempt(record)
            try:
                status_code = self.transport.put(self.endpoint, body)
            except Exception as e:
                status_code = None
                if isinstance(e, requests.RequestException) and e.response is not None:
                    status_code = e.response.status_code
                logger.warning(
                    f"Delivery {record.delivery_id} ({record.report_name}) attempt "
                    f"{attempt + 1} failed: {e}"
                )
                self.ledger.log_failure(record, self.simpy_env.now, str(e), status_code)
                continue

            self.ledger.log_success(record, self.simpy_env.now, status_code)
            logger.debug(f"Delivery {record.delivery_id} ({record.report_name}) succeeded: {status_code}")
            return
