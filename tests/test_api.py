"""Tests for the results API router."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from flowperf.api import configure_results_router, create_app, router
from flowperf.models import AverageLimits, FlowPerfConfig
from tests.fakes import FakeBaselineLookup, FakeSink, RecordingReporter


class FakeStore(FakeBaselineLookup, FakeSink):
    def __init__(self, averages=None, *, error=None) -> None:
        FakeBaselineLookup.__init__(self, averages)
        FakeSink.__init__(self, error=error)


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _body(*results):
    return {"orgContext": {"orgId": "00D000000000001"}, "results": list(results)}


class TestPostResults:
    def test_alert_saved(self, client, db_config):
        store = FakeStore({("F", "A"): AverageLimits(cpu_time=100)})
        reporter = RecordingReporter()
        configure_results_router(config=db_config, reporters=[reporter], store=store)

        response = client.post(
            "/results",
            json=_body(
                {"flowName": "F", "action": "A", "cpuTime": 120},
                {"flowName": "F", "action": "A", "cpuTime": 90},
            ),
        )

        assert response.status_code == 200
        body = response.json()
        assert body == {
            "results": 2,
            "failed_reporters": [],
            "eligible": 2,
            "alerts": 1,
            "saved": True,
        }
        assert len(reporter.calls) == 1
        assert store.saved[0][1].org_id == "00D000000000001"

    def test_store_unavailable_still_reports(self, client, db_config):
        reporter = RecordingReporter()
        configure_results_router(config=db_config, reporters=[reporter], store=None)

        response = client.post("/results", json=_body({"flowName": "F", "action": "A"}))

        assert response.status_code == 503
        assert len(reporter.calls) == 1
        assert reporter.calls[0][0].flow_name == "F"

    def test_snake_case_org_context_accepted(self, client):
        configure_results_router(
            config=FlowPerfConfig(database_url=None), reporters=[], store=None
        )
        response = client.post(
            "/results",
            json={"org_context": {"org_id": "00D1"}, "results": [{"flowName": "F", "action": "A"}]},
        )
        assert response.status_code == 200

    def test_store_failure_is_500(self, client, db_config):
        store = FakeStore(error=RuntimeError("insert failed"))
        configure_results_router(config=db_config, reporters=[], store=store)
        response = client.post("/results", json=_body({"flowName": "F", "action": "A"}))
        assert response.status_code == 500

    def test_negative_metric_rejected(self, client, db_config):
        configure_results_router(config=db_config, reporters=[], store=FakeStore())
        response = client.post(
            "/results", json=_body({"flowName": "F", "action": "A", "cpuTime": -1})
        )
        assert response.status_code == 422

    def test_reporting_only_without_database(self, client):
        reporter = RecordingReporter()
        configure_results_router(
            config=FlowPerfConfig(database_url=None), reporters=[reporter], store=None
        )
        response = client.post("/results", json=_body({"flowName": "F", "action": "A"}))
        assert response.status_code == 200
        assert response.json()["saved"] is False
        assert len(reporter.calls) == 1


class TestHealth:
    def test_reports_database_flag(self, client, db_config):
        configure_results_router(config=db_config, reporters=[])
        assert client.get("/health").json() == {"ok": True, "database_enabled": True}


class TestCreateApp:
    def test_lifespan_configures_router(self):
        app = create_app(FlowPerfConfig(database_url=None, reporters=[]))
        with TestClient(app) as client:
            response = client.get("/health")
        assert response.json() == {"ok": True, "database_enabled": False}
