"""Pluggable result reporters.

Reporters receive every converted result in the batch, regardless of
alerting eligibility. Registered by name in ``FlowPerfConfig.reporters``:

  console  — rich table on stdout
  json     — timestamped JSON file under ``report_dir``
  webhook  — POST to ``webhook_url``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flowperf.errors import FlowPerfError

from .base import Reporter, run_reporters
from .console import ConsoleReporter
from .json_file import JsonFileReporter
from .webhook import WebhookReporter

if TYPE_CHECKING:
    from flowperf.models import FlowPerfConfig


def build_reporters(config: FlowPerfConfig) -> list[Reporter]:
    """Assemble reporters in the configured order."""
    reporters: list[Reporter] = []
    for name in config.reporters:
        if name == "console":
            reporters.append(ConsoleReporter())
        elif name == "json":
            reporters.append(JsonFileReporter(config.report_dir))
        elif name == "webhook":
            if not config.webhook_url:
                msg = "Reporter 'webhook' requires FLOWPERF_WEBHOOK_URL"
                raise FlowPerfError(msg)
            reporters.append(
                WebhookReporter(config.webhook_url, timeout=config.webhook_timeout_sec)
            )
        else:
            msg = f"Unknown reporter '{name}'. Choose from: console, json, webhook"
            raise FlowPerfError(msg)
    return reporters


__all__ = [
    "ConsoleReporter",
    "JsonFileReporter",
    "Reporter",
    "WebhookReporter",
    "build_reporters",
    "run_reporters",
]
