#!/usr/bin/env python3
"""
diskpanel - Terminal panel showing per-device disk usage and I/O throughput.

Polls disk counters and mount usage, diffs successive polls and renders a table.
"""
import json
import logging
import time

import click

from diskpanel.cli.dashboard import Dashboard
from diskpanel.config import Config
from diskpanel.monitors.disk import CollectionError, StatsCollector
from diskpanel.widgets.disk import DiskWidget


def setup_logging(cfg: Config):
    """Configure the root logger from the 'logging' config section."""
    log_cfg = cfg.get_logging_config()
    kwargs = {
        "level": getattr(logging, str(log_cfg.get("level", "WARNING")).upper(), logging.WARNING),
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    }
    if log_cfg.get("file"):
        kwargs["filename"] = log_cfg["file"]
    logging.basicConfig(**kwargs)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """diskpanel - per-device disk usage and throughput in the terminal."""
    pass


@cli.command()
@click.option('--refresh-rate', '-r', default=None, type=click.FloatRange(min=0, min_open=True),
              help='Dashboard refresh rate in seconds')
@click.option('--config', '-c', default='config.yaml', help='Path to configuration file')
def dashboard(refresh_rate, config):
    """Launch the real-time disk panel."""
    try:
        cfg = Config(config)
        setup_logging(cfg)
        widget = DiskWidget.from_config(cfg)
        dash = Dashboard(widget, refresh_rate=refresh_rate or cfg.get("cli.refresh_rate", 1.0))
        dash.run_dashboard()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.option('--format', '-f', type=click.Choice(['json', 'table']), default='table',
              help='Output format')
@click.option('--config', '-c', default='config.yaml', help='Path to configuration file')
def snapshot(format, config):
    """Poll twice one interval apart and print the result."""
    try:
        cfg = Config(config)
        setup_logging(cfg)
        widget = DiskWidget.from_config(cfg)

        if format == 'table':
            Dashboard(widget).display_snapshot()
            return

        widget.update()
        time.sleep(float(widget.get_update_interval()))
        widget.update()
        if widget.last_error:
            raise widget.last_error

        snapshot_data = {
            "update_interval": str(widget.get_update_interval()),
            "partitions": [widget.partitions[name].to_dict() for name in sorted(widget.partitions)],
            "skipped": widget.skipped,
            "degraded": [mount._asdict() for mount in widget.degraded],
        }
        click.echo(json.dumps(snapshot_data, indent=2))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)


@cli.command()
@click.option('--config', '-c', default='config.yaml', help='Path to configuration file')
def info(config):
    """List physical partitions and the device names their counters are read under."""
    try:
        cfg = Config(config)
        collector = StatsCollector(aliases=cfg.get("disk.aliases") or {})

        try:
            counters = collector.get_io_counters()
        except CollectionError as e:
            click.echo(f"Warning: {e}", err=True)
            counters = {}

        click.echo("Physical Partitions")
        click.echo("=" * 60)
        for partition in collector.get_partitions():
            name = collector.device_name(partition.device)
            status = "" if name in counters else "  (no I/O counters)"
            click.echo(f"{partition.device:<24} {name:<12} {partition.mountpoint}{status}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)


if __name__ == '__main__':
    cli()
