"""Tests for the HTTP API."""

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from menh_engine.api.endpoints import app

from tests.conftest import FAIL_KHAC, PASS_13, PASS_15


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestInfo:
    def test_root(self, client) -> None:
        body = client.get("/").json()
        assert body["status"] == "running"
        assert "Analyze" in body["endpoints"]

    def test_health(self, client) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_defaults(self, client) -> None:
        response = client.get("/api/config/defaults", params={"user_menh": "Thủy"})
        assert response.status_code == 200
        body = response.json()
        assert body["user_menh"] == "Thuy"
        assert body["mode"] == "Compatibility"
        assert body["score_sinh"] == 3

    def test_defaults_unknown_menh(self, client) -> None:
        response = client.get("/api/config/defaults", params={"user_menh": "Wood"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid configuration"


class TestAnalyze:
    def test_ranked_results(self, client, kim_config_dict) -> None:
        raw_text = f"{PASS_13}\n{FAIL_KHAC}\njunk\n{PASS_15}\n"
        response = client.post(
            "/api/analyze", json={"raw_text": raw_text, "config": kim_config_dict}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["results"] == [
            {"number": PASS_15, "score": 15.0},
            {"number": PASS_13, "score": 13.0},
        ]
        assert body["rejected_by"] == {"khac_max": 1}
        assert body["parsed"] == 3
        assert body["total_processed"] == 4

    def test_invalid_config(self, client, kim_config_dict) -> None:
        kim_config_dict["score_khac"] = "lots"
        response = client.post(
            "/api/analyze", json={"raw_text": PASS_13, "config": kim_config_dict}
        )
        assert response.status_code == 400
        assert "score_khac" in response.json()["detail"]

    def test_export(self, client, kim_config_dict) -> None:
        response = client.post(
            "/api/analyze/export",
            json={"raw_text": f"{PASS_13}\n{PASS_15}", "config": kim_config_dict},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text == f"{PASS_15}  score=15.00\n{PASS_13}  score=13.00"


class TestQuickCheck:
    def test_valid(self, client, kim_config_dict) -> None:
        response = client.post(
            "/api/quick-check", json={"number": PASS_15, "config": kim_config_dict}
        )
        assert response.json() == {"Valid": {"score": 15.0}}

    def test_rejected(self, client, kim_config_dict) -> None:
        response = client.post(
            "/api/quick-check", json={"number": FAIL_KHAC, "config": kim_config_dict}
        )
        assert response.json() == {"Invalid": {"reason": "khac_max"}}

    def test_format(self, client, kim_config_dict) -> None:
        response = client.post(
            "/api/quick-check", json={"number": "12ab", "config": kim_config_dict}
        )
        assert response.json() == {"Invalid": {"reason": "format"}}

    def test_invalid_config(self, client, kim_config_dict) -> None:
        kim_config_dict["user_menh"] = "Wood"
        response = client.post(
            "/api/quick-check", json={"number": PASS_15, "config": kim_config_dict}
        )
        assert response.status_code == 400

    def test_missing_body_field(self, client) -> None:
        response = client.post("/api/quick-check", json={"number": PASS_15})
        assert response.status_code == 422


class TestRouting:
    @pytest.mark.parametrize("path", ["/api/analyze", "/api/analyze/export", "/api/quick-check"])
    def test_analysis_handlers_run_in_threadpool(self, path: str) -> None:
        route = next(r for r in app.routes if isinstance(r, APIRoute) and r.path == path)
        assert not inspect.iscoroutinefunction(route.endpoint)
