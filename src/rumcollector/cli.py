"""Command-line interface for rumcollector."""

import logging
import sys
from pathlib import Path

import click

from rumcollector.orchestration import RumCollector
from rumcollector.utils.config_validator import validate_config_file

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@click.group()
@click.version_option(version="0.1.0", prog_name="rumcollector")
def cli():
    """rumcollector: Real user monitoring collector for web-vitals metrics."""
    pass


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--endpoint", "-e", default=None,
    help="Collection endpoint URL (defaults to collector.endpoint or $RUM_ENDPOINT)"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="Logging level"
)
def run(config_file: str, endpoint: str, format: str, log_level: str):
    """Replay a recorded page session and deliver its reports."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    click.echo(f"Loading page session from {config_file}...")

    try:
        if format == "yaml":
            collector = RumCollector.from_yaml_file(config_file, endpoint=endpoint)
        else:
            collector = RumCollector.from_json_file(config_file, endpoint=endpoint)

        click.echo(f"Reporting to {collector.endpoint}")
        summary = collector.run()

        click.echo("\nPage session completed!")
        click.echo(f"Session: {summary['session']['session_id']} ({summary['session']['pathname']})")
        click.echo(f"Reports delivered: {summary['deliveries']['successful']}/{summary['deliveries']['total']}")
        if summary["deliveries"]["failed"]:
            click.echo(click.style(f"Failed deliveries: {summary['deliveries']['failed']}", fg="yellow"))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o", default="example_session.yaml",
    help="Output file path"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
def generate_config(output: str, format: str):
    """Generate an example page session file."""
    example_config = {
        "collector": {
            "endpoint": "https://collector.example.com/v1/rum",
            "max_session_time_s": 30,
            "random_seed": 42,
            "delivery_latency_s": 0.05,
            "retry_attempts": 0,
        },
        "page": {
            "innerWidth": 1280,
            "innerHeight": 720,
            "navigator": {
                "userAgent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36",
                "userAgentData": {"platform": "Linux", "vendor": "Google Inc."},
            },
            "document": {
                "location": {"pathname": "/pricing"},
                "scripts": [
                    {"src": "https://example.com/_next/static/chunks/main.js", "attributes": ["defer"]},
                    {"src": "https://cdn.example.com/analytics.js", "attributes": ["async"]},
                    {"attributes": []},
                ],
            },
            "performance": {
                "marks": [{"name": "docStart", "startTime": 0}],
                "measures": [
                    {"name": "Next.js-before-hydration", "startTime": 0, "duration": 180.5},
                    {"name": "Next.js-hydration", "startTime": 180.5, "duration": 42.0},
                ],
            },
        },
        "emissions": [
            {"kind": "TTFB", "at_s": 0.2, "metric": {"value": 120.0, "delta": 120.0}},
            {
                "kind": "LCP",
                "at_s": 1.4,
                "metric": {
                    "value": 1350.0,
                    "delta": 1350.0,
                    "entries": [{"size": 48000, "duration": 0, "url": "https://example.com/hero.webp"}],
                },
            },
            {"kind": "FID", "at_s": 3.0, "metric": {"value": 12.0, "delta": 12.0}},
            {
                "kind": "CLS",
                "at_s": 10.0,
                "metric": {
                    "value": 0.11,
                    "delta": 0.11,
                    "entries": [
                        {
                            "value": 0.09,
                            "sources": [
                                {
                                    "node": {"classList": ["banner"], "parentElement": {"classList": ["header"]}},
                                    "previousRect": {"width": 1280, "height": 0},
                                    "currentRect": {"width": 1280, "height": 96},
                                }
                            ],
                        },
                        {"value": 0.01, "sources": []},
                    ],
                },
            },
        ],
        "output": {
            "summary_json_path": "results/summary.json",
            "deliveries_csv_path": "results/deliveries.csv",
        },
    }

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "yaml":
        import yaml
        with open(output_path, "w") as f:
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False)
    else:
        import json
        with open(output_path, "w") as f:
            json.dump(example_config, f, indent=2)

    click.echo(f"Generated example page session at {output_path}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate(config_file: str):
    """Validate a page session file without running it."""
    click.echo(f"Validating configuration: {config_file}")

    try:
        is_valid, errors, _ = validate_config_file(config_file)

        if is_valid:
            click.echo(click.style("✓ Configuration is valid", fg="green"))
        else:
            click.echo(click.style(f"✗ Configuration has {len(errors)} errors:", fg="red"))
            for i, error in enumerate(errors[:20], 1):
                click.echo(f"  {i}. {error}")
            if len(errors) > 20:
                click.echo(f"  ... and {len(errors) - 20} more errors")

        sys.exit(0 if is_valid else 1)

    except Exception as e:
        click.echo(click.style(f"Error validating configuration: {e}", fg="red"))
        sys.exit(1)


if __name__ == "__main__":
    cli()
