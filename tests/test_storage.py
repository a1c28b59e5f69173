"""Tests for the PostgreSQL result store against a fake asyncpg pool."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
from whenever import Instant, TimeDelta

from flowperf.models import (
    Alert,
    AverageLimits,
    FlowActionKey,
    OrgContext,
    TestResultOutput,
    convert_output_to_test_result,
)
from flowperf.storage import SCHEMA_PATH, ResultStore
from flowperf_core.types import TrackedMetric

pytestmark = pytest.mark.anyio


class FakeConnection:
    def __init__(self, rows):
        self._rows = rows
        self.fetch_args = None
        self.executed: list[tuple[str, list]] = []
        self.transactions = 0

    async def fetch(self, query, *args):
        self.fetch_args = args
        return self._rows

    async def executemany(self, query, rows):
        self.executed.append((query, rows))

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield


class FakePool:
    def __init__(self, rows=()):
        self.conn = FakeConnection(list(rows))

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


def _row(flow, action, **metrics):
    row = {"flow_name": flow, "action": action}
    row.update({m.value: metrics.get(m.value) for m in TrackedMetric})
    return row


class TestFetchAverages:
    async def test_every_key_gets_an_entry(self):
        pool = FakePool([_row("F", "A", cpu_time=100.0, heap_size=2048.0)])
        store = ResultStore(pool=pool)
        keys = [
            FlowActionKey(flow_name="F", action_name="A"),
            FlowActionKey(flow_name="G", action_name="B"),
        ]

        averages = await store.fetch_averages(keys)

        assert averages[keys[0]] == AverageLimits(cpu_time=100.0, heap_size=2048.0)
        assert averages[keys[1]] == AverageLimits()
        flows, actions, since = pool.conn.fetch_args
        assert flows == ["F", "G"]
        assert actions == ["A", "B"]
        assert since.tzinfo is not None
        age = Instant.now() - Instant.from_py_datetime(since)
        assert TimeDelta(hours=239) < age <= TimeDelta(hours=241)

    async def test_window_days_sets_cutoff(self):
        pool = FakePool()
        await ResultStore(pool=pool, window_days=3).fetch_averages(
            [FlowActionKey(flow_name="F", action_name="A")]
        )
        since = pool.conn.fetch_args[2]
        age = Instant.now() - Instant.from_py_datetime(since)
        assert TimeDelta(hours=71) < age <= TimeDelta(hours=73)


class TestSave:
    async def test_results_and_alerts_in_one_transaction(self):
        pool = FakePool()
        store = ResultStore(pool=pool)
        results = [
            convert_output_to_test_result(
                TestResultOutput(flow_name="F", action="A", cpu_time=120, timer=10)
            )
        ]
        alerts = [
            Alert(
                flow_name="F",
                action_name="A",
                cpu_time_degraded=20,
                created_at="2026-01-15T00:00:00Z",
            )
        ]

        await store.save(results, OrgContext(org_id="00D1", release_version="252"), alerts)

        assert pool.conn.transactions == 1
        (result_query, result_rows), (alert_query, alert_rows) = pool.conn.executed
        assert "INSERT INTO test_results" in result_query
        assert result_rows[0][1:9] == ("F", "A", 120.0, 0.0, 0.0, 0.0, 0.0, 10.0)
        assert result_rows[0][10:12] == ("00D1", "252")
        assert "INSERT INTO alerts" in alert_query
        assert alert_rows[0][1:8] == ("F", "A", 20.0, 0.0, 0.0, 0.0, 0.0)
        assert alert_rows[0][-1] == Instant.parse_iso("2026-01-15T00:00:00Z").py_datetime()
        assert result_rows[0][-1] == Instant.parse_iso(results[0].created_at).py_datetime()

    async def test_no_alerts_skips_alert_insert(self):
        pool = FakePool()
        await ResultStore(pool=pool).save([], OrgContext(org_id="00D1"), [])
        assert pool.conn.executed == []


def test_schema_defines_tables():
    schema = SCHEMA_PATH.read_text()
    assert "CREATE TABLE IF NOT EXISTS test_results" in schema
    assert "CREATE TABLE IF NOT EXISTS alerts" in schema
