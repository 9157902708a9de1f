"""Collector orchestrator: mounts on a page and wires metric sources to reports."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core import PageEventLoop
from ..delivery import DeliveryChannel, DeliveryLedger, HttpTransport, resolve_endpoint
from ..page import Window
from ..reports import (
    ReportHandler,
    build_input_delay_report,
    build_layout_shift_report,
    build_load_timing_report,
    build_paint_report,
)
from ..reports.builders import DOCUMENT_END_MARK
from ..session import SessionContext, capture_context, generate_session_id
from ..sources import MetricEmitter, parse_emissions
from ..utils.config_validator import ConfigurationError

logger = logging.getLogger(__name__)


class RumCollector:
    """Main entry point to replay a recorded page session through the collector."""

    def __init__(
        self,
        config_data: Dict[str, Any],
        endpoint: Optional[str] = None,
        transport: Optional[Any] = None,
    ):
        """Initialize the collector with a session configuration.

        Args:
            config_data: Session configuration with collector, page and emissions sections
            endpoint: Collection endpoint; overrides the config and RUM_ENDPOINT
            transport: Transport used by the delivery channel; defaults to HttpTransport
        """
        self.config = config_data
        self._validate_config()

        collector_config = self.config["collector"]
        self.endpoint = resolve_endpoint(endpoint or collector_config.get("endpoint"))
        if not self.endpoint:
            raise ConfigurationError(
                "No collection endpoint: set RUM_ENDPOINT, collector.endpoint or --endpoint"
            )
        self.transport = transport

        # Component instances (initialized in mount)
        self.page_loop: Optional[PageEventLoop] = None
        self.window: Optional[Window] = None
        self.context: Optional[SessionContext] = None
        self.ledger: Optional[DeliveryLedger] = None
        self.channel: Optional[DeliveryChannel] = None
        self.emitter: Optional[MetricEmitter] = None

        logger.info("RumCollector initialized")

    def _validate_config(self) -> None:
        """Validate the session configuration structure."""
        for section in ("collector", "page", "emissions"):
            if section not in self.config:
                raise ConfigurationError(f"Missing required configuration section: {section}")

        if "max_session_time_s" not in self.config["collector"]:
            raise ConfigurationError("collector.max_session_time_s is required")

    def mount(self) -> None:
        """Mount on the page: mark document end, capture context, register handlers."""
        collector_config = self.config["collector"]

        # 1. Page event loop and read-only page data
        self.page_loop = PageEventLoop(collector_config)
        simpy_env = self.page_loop.get_simpy_env()
        self.window = Window.model_validate(self.config["page"])

        # 2. Document end mark, then the session context
        self.window.performance.mark(DOCUMENT_END_MARK, self.page_loop.now_ms())
        self.context = capture_context(self.window, generate_session_id(self.page_loop.rng))

        # 3. Delivery channel
        self.ledger = DeliveryLedger()
        transport = self.transport or HttpTransport(timeout_s=collector_config.get("request_timeout_s"))
        self.channel = DeliveryChannel(
            simpy_env,
            self.endpoint,
            transport=transport,
            ledger=self.ledger,
            delivery_latency_s=collector_config.get("delivery_latency_s", 0.0),
            retry_attempts=collector_config.get("retry_attempts", 0),
        )

        # 4. One handler per metric source
        self.emitter = MetricEmitter(simpy_env, parse_emissions(self.config["emissions"]))
        self.emitter.on_cls(ReportHandler(build_layout_shift_report, self.context, self.channel))
        self.emitter.on_fid(
            ReportHandler(build_input_delay_report, self.context, self.channel, window=self.window)
        )
        self.emitter.on_lcp(ReportHandler(build_paint_report, self.context, self.channel))
        self.emitter.on_ttfb(ReportHandler(build_load_timing_report, self.context, self.channel))

        logger.info(f"Collector mounted on {self.context.pathname}")

    def run(self) -> Dict[str, Any]:
        """Run the page session and return the delivery summary."""
        if self.page_loop is None:
            self.mount()

        logger.info("=" * 60)
        logger.info("STARTING PAGE SESSION")
        logger.info("=" * 60)

        self.page_loop.schedule_process(self.emitter.emit_process)
        self.page_loop.run()

        summary = self.ledger.generate_summary_report()
        summary["session"] = {
            "session_id": self.context.session_id,
            "pathname": self.context.pathname,
            "duration_s": self.page_loop.now(),
            "metrics_emitted": self.emitter.emitted_count,
        }

        output_config = self.config.get("output") or {}

        summary_path = output_config.get("summary_json_path")
        if summary_path:
            summary_file = Path(summary_path)
            summary_file.parent.mkdir(parents=True, exist_ok=True)
            with open(summary_file, "w") as f:
                json.dump(summary, f, indent=2)
            logger.info(f"Saved summary report to {summary_file}")

        csv_path = output_config.get("deliveries_csv_path")
        if csv_path:
            csv_file = Path(csv_path)
            csv_file.parent.mkdir(parents=True, exist_ok=True)
            self.ledger.get_deliveries_df().to_csv(csv_file, index=False)
            logger.info(f"Saved delivery records to {csv_file}")

        logger.info("=" * 60)
        logger.info("PAGE SESSION COMPLETED")
        logger.info("=" * 60)

        return summary

    @classmethod
    def from_yaml_file(cls, config_path: str, **kwargs) -> "RumCollector":
        """Create a collector from a YAML session file."""
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)

        return cls(config_data, **kwargs)

    @classmethod
    def from_json_file(cls, config_path: str, **kwargs) -> "RumCollector":
        """Create a collector from a JSON session file."""
        with open(config_path, "r") as f:
            config_data = json.load(f)

        return cls(config_data, **kwargs)
