"""Page event loop wrapper around SimPy."""

import logging
import random
from typing import Any, Callable, Dict, Optional

import simpy

logger = logging.getLogger(__name__)


class PageEventLoop:
    """Wrapper around simpy.Environment standing in for the page's event loop.

    Metric callbacks and delivery requests run as cooperative processes on a
    single thread; simulated time is in seconds since navigation start.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize the page event loop.

        Args:
            config: Collector configuration containing:
                - max_session_time_s: How long the page stays open, in simulated seconds
                - random_seed (optional): Seed for session-ID generation
        """
        self.env: simpy.Environment = simpy.Environment()
        self.config: Dict[str, Any] = config
        self.active_processes: list = []

        self.rng = random.Random(config.get("random_seed"))
        if "random_seed" in config:
            logger.info(f"Random seed set to: {config['random_seed']}")

        logger.info("PageEventLoop initialized")

    def schedule_process(self, process_generator_func: Callable, *args, **kwargs) -> simpy.Process:
        """Schedule a process (a generator function) on the loop."""
        process = self.env.process(process_generator_func(*args, **kwargs))
        self.active_processes.append(process)
        logger.debug(f"Scheduled process: {process_generator_func.__name__}")
        return process

    def run(self, until: Optional[float] = None) -> None:
        """Run until ``max_session_time_s`` (or ``until``) or until no events remain."""
        if until is None:
            until = self.config.get("max_session_time_s", float("inf"))

        logger.info(f"Starting page session (max time: {until}s)")

        try:
            self.env.run(until=until)
        except Exception as e:
            logger.error(f"Error during page session at time {self.env.now}: {e}")
            raise
        finally:
            logger.info(f"Page session ended at time {self.env.now}")

    def now(self) -> float:
        return self.env.now

    def now_ms(self) -> float:
        """Current time as a performance timestamp (milliseconds)."""
        return self.env.now * 1000

    def get_simpy_env(self) -> simpy.Environment:
        return self.env
