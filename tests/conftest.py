"""Pytest configuration and fixtures for the flowperf tests."""

import pytest

from flowperf.models import FlowPerfConfig, OrgContext, RangeCollection, TestResultOutput


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def org_context() -> OrgContext:
    return OrgContext(org_id="00D000000000001", release_version="252.3")


@pytest.fixture
def db_config(monkeypatch: pytest.MonkeyPatch) -> FlowPerfConfig:
    """Config with the database phase enabled and zero tolerance."""
    for var in ("FLOWPERF_RANGES_FILE", "FLOWPERF_STORE_ALERTS", "FLOWPERF_REPORTERS"):
        monkeypatch.delenv(var, raising=False)
    return FlowPerfConfig(
        database_url="postgresql://flowperf@localhost/flowperf",
        ranges=RangeCollection(),
    )


@pytest.fixture
def sample_output() -> TestResultOutput:
    """The raw output shape emitted by the test framework."""
    return TestResultOutput.model_validate(
        {
            "flowName": "F",
            "action": "A",
            "cpuTime": 120,
            "dmlRows": 10,
            "dmlStatements": 2,
            "heapSize": 4096,
            "queryRows": 50,
            "timer": 830,
        }
    )
