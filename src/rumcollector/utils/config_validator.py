"""
Configuration validation for recorded page sessions.

This module provides validation for:
- Collector settings
- Page snapshots
- Metric emissions
- Complete session configurations
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..page.models import Window
from ..sources.models import MetricKind, parse_metric

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


class CollectorConfigValidator:
    """Validates the collector section."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        errors = []

        if 'max_session_time_s' not in config:
            errors.append("Collector missing max_session_time_s")
        elif not isinstance(config['max_session_time_s'], (int, float)) or config['max_session_time_s'] <= 0:
            errors.append(f"Invalid max_session_time_s: {config['max_session_time_s']}")

        latency = config.get('delivery_latency_s', 0)
        if not isinstance(latency, (int, float)) or latency < 0:
            errors.append(f"Invalid delivery_latency_s: {latency}")

        retries = config.get('retry_attempts', 0)
        if not isinstance(retries, int) or retries < 0:
            errors.append(f"Invalid retry_attempts: {retries} (must be a non-negative integer)")

        timeout = config.get('request_timeout_s')
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            errors.append(f"Invalid request_timeout_s: {timeout}")

        endpoint = config.get('endpoint')
        if endpoint is not None and not str(endpoint).startswith(('http://', 'https://')):
            errors.append(f"Endpoint must be an http(s) URL: {endpoint}")

        return errors


class PageConfigValidator:
    """Validates the recorded page snapshot."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        try:
            Window.model_validate(config)
        except ValidationError as e:
            return [f"Page {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        return []


class EmissionConfigValidator:
    """Validates the metric emission timeline."""

    VALID_KINDS = {kind.value for kind in MetricKind}

    @classmethod
    def validate(cls, emissions: List[Dict[str, Any]]) -> List[str]:
        errors = []

        for i, emission in enumerate(emissions):
            kind = emission.get('kind')
            if kind not in cls.VALID_KINDS:
                errors.append(f"Emission {i}: Unknown kind {kind!r} (must be one of {sorted(cls.VALID_KINDS)})")
                continue

            at_s = emission.get('at_s', 0)
            if not isinstance(at_s, (int, float)) or at_s < 0:
                errors.append(f"Emission {i}: Invalid at_s: {at_s}")

            if 'metric' not in emission:
                errors.append(f"Emission {i}: Missing metric")
                continue

            try:
                parse_metric(MetricKind(kind), emission['metric'])
            except ValidationError as e:
                for err in e.errors():
                    loc = '.'.join(str(p) for p in err['loc'])
                    errors.append(f"Emission {i} ({kind}) {loc}: {err['msg']}")

        return errors


class SessionConfigValidator:
    """Validates a complete session configuration."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        all_errors = []

        if not isinstance(config, dict):
            return False, ["Configuration must be a mapping"]

        required_top = {'collector', 'page', 'emissions'}
        missing_top = required_top - set(config.keys())
        if missing_top:
            all_errors.append(f"Missing top-level fields: {sorted(missing_top)}")
            return False, all_errors

        all_errors.extend(CollectorConfigValidator.validate(config['collector'] or {}))
        all_errors.extend(PageConfigValidator.validate(config['page'] or {}))
        all_errors.extend(EmissionConfigValidator.validate(config['emissions'] or []))

        if not config['emissions']:
            logger.warning("Session configuration has no emissions; no reports will be sent")

        return len(all_errors) == 0, all_errors


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file, choosing by suffix."""
    config_file = Path(config_path)

    with open(config_file) as f:
        if config_file.suffix in ['.yaml', '.yml']:
            return yaml.safe_load(f)
        return json.load(f)


def validate_config_file(config_path: str) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
    """
    Load and validate a session configuration file.

    Returns:
        (is_valid, errors, config)
    """
    config = load_config_file(config_path)

    is_valid, errors = SessionConfigValidator.validate(config)

    if not is_valid:
        logger.warning(f"Configuration has {len(errors)} validation errors")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more errors")

    return is_valid, errors, config
