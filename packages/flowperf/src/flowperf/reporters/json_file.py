"""Reporter writing each batch to a timestamped JSON file."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

from whenever import Instant

if TYPE_CHECKING:
    from flowperf.models import TestResult

logger = logging.getLogger("flowperf.reporters.json_file")


class JsonFileReporter:
    name = "json"

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def _target(self) -> Path:
        stamp = Instant.now().py_datetime().strftime("%Y%m%dT%H%M%S%fZ")
        return self._directory / f"results-{stamp}.json"

    async def report(self, results: Sequence[TestResult]) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._target()
        payload = [r.model_dump(mode="json", by_alias=True) for r in results]
        target.write_text(json.dumps(payload, indent=2) + "\n")
        logger.info("Wrote %d results to %s", len(results), target)
