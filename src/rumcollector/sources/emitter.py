"""Replays recorded web-vitals emissions onto the page event loop."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import simpy

from .models import Metric, MetricKind, parse_metric

logger = logging.getLogger(__name__)

MetricHandler = Callable[[Metric], Any]


@dataclass
class Emission:
    """One metric callback firing at simulated time ``at_s``."""

    kind: MetricKind
    at_s: float
    metric: Metric


def parse_emissions(emissions_config: List[Dict[str, Any]]) -> List[Emission]:
    """Parse emission configurations into Emission objects, ordered by time.

    Each emission is validated on its own; a malformed one is logged and
    dropped so the remaining metrics still fire.
    """
    emissions = []
    for position, emission_config in enumerate(emissions_config or []):
        try:
            kind = MetricKind(emission_config["kind"])
            emission = Emission(
                kind=kind,
                at_s=float(emission_config.get("at_s", 0.0)),
                metric=parse_metric(kind, emission_config.get("metric") or {}),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed emission at position {position}: {e}")
            continue
        emissions.append(emission)
    # Stable sort keeps recorded order for simultaneous emissions
    return sorted(emissions, key=lambda e: e.at_s)


class MetricEmitter:
    """Registry of metric callbacks, one per kind, in the style of web-vitals."""

    def __init__(self, simpy_env: simpy.Environment, emissions: List[Emission]):
        self.simpy_env = simpy_env
        self.emissions = emissions
        self.handlers: Dict[MetricKind, MetricHandler] = {}
        self.emitted_count = 0

    def register(self, kind: MetricKind, handler: MetricHandler) -> None:
        self.handlers[MetricKind(kind)] = handler
        logger.debug(f"Registered handler for {MetricKind(kind).value}")

    def on_cls(self, handler: MetricHandler) -> None:
        self.register(MetricKind.CLS, handler)

    def on_lcp(self, handler: MetricHandler) -> None:
        self.register(MetricKind.LCP, handler)

    def on_fid(self, handler: MetricHandler) -> None:
        self.register(MetricKind.FID, handler)

    def on_ttfb(self, handler: MetricHandler) -> None:
        self.register(MetricKind.TTFB, handler)

    def emit_process(self):
        """Main process that fires each emission at its recorded time."""
        logger.info(f"Starting metric emission ({len(self.emissions)} emissions)")

        for emission in self.emissions:
            wait = emission.at_s - self.simpy_env.now
            if wait > 0:
                yield self.simpy_env.timeout(wait)

            handler = self.handlers.get(emission.kind)
            if handler is None:
                logger.warning(f"No handler registered for {emission.kind.value}; skipping emission")
                continue

            self.emitted_count += 1
            try:
                handler(emission.metric)
            except Exception:
                logger.exception(f"Handler for {emission.kind.value} failed at {self.simpy_env.now}s")

        logger.info(f"Metric emission completed. Emitted {self.emitted_count} metrics")
