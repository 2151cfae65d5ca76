"""Tests for the HTTP endpoints."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from a11y_tester.agents.architect.report_store import ReportStore
from a11y_tester.errors import AccessibilityTestError, ErrorCode
from a11y_tester.models import TestRunResult


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.parametrize("body", [None, {}, {"url": ""}, {"url": "   "}])
def test_submit_requires_url(client: TestClient, tester_mock: Mock, body) -> None:
    response = client.post("/test", json=body) if body is not None else client.post("/test")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "code": "MISSING_URL",
        "error": "URL is required",
    }
    tester_mock.run.assert_not_called()


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"json": {"url": 123}},
        {"json": {"url": ["https://example.com"]}},
        {"json": ["https://example.com"]},
        {"content": b"url=https://example.com", "headers": {"content-type": "application/json"}},
    ],
)
def test_submit_rejects_malformed_body(client: TestClient, tester_mock: Mock, request_kwargs: dict) -> None:
    response = client.post("/test", **request_kwargs)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "code": "INVALID_URL",
        "error": "Please enter a valid URL starting with http:// or https://",
    }
    tester_mock.run.assert_not_called()


def test_invalid_query_parameter_is_structured(client: TestClient) -> None:
    response = client.get("/runs", params={"limit": 0})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_REQUEST"
    assert "limit" in body["details"]


def test_submit_returns_results_and_report_id(
    client: TestClient,
    tester_mock: Mock,
    store: ReportStore,
    sample_result: TestRunResult,
) -> None:
    tester_mock.run.return_value = sample_result

    response = client.post("/test", json={"url": "https://example.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["reportId"].startswith("report-")
    assert body["results"]["url"] == "https://example.com"
    assert body["results"]["scoreResult"]["score"] == sample_result.score_result.score
    assert body["results"]["summary"]["totalViolations"] == 3
    assert store.exists(body["reportId"])
    tester_mock.run.assert_awaited_once_with("https://example.com")


def test_submit_records_completed_run(
    client: TestClient,
    tester_mock: Mock,
    sample_result: TestRunResult,
) -> None:
    tester_mock.run.return_value = sample_result
    report_id = client.post("/test", json={"url": "https://example.com"}).json()["reportId"]

    response = client.get(f"/runs/{report_id}")

    assert response.status_code == 200
    run = response.json()
    assert run["reportId"] == report_id
    assert run["status"] == "completed"
    assert run["score"] == sample_result.score_result.score
    assert run["grade"] == sample_result.score_result.grade


@pytest.mark.parametrize(
    ("code", "status"),
    [
        (ErrorCode.INVALID_URL, 400),
        (ErrorCode.NAVIGATION_ERROR, 404),
        (ErrorCode.TIMEOUT_ERROR, 504),
        (ErrorCode.RATE_LIMIT, 429),
        (ErrorCode.INJECTION_ERROR, 500),
        (ErrorCode.TEST_ERROR, 500),
        (ErrorCode.UNKNOWN_ERROR, 500),
    ],
)
def test_submit_maps_error_codes(
    client: TestClient,
    tester_mock: Mock,
    code: ErrorCode,
    status: int,
) -> None:
    tester_mock.run.side_effect = AccessibilityTestError("It failed", code, "engine detail")

    response = client.post("/test", json={"url": "https://example.com"})

    assert response.status_code == status
    assert response.json() == {
        "success": False,
        "code": code.value,
        "error": "It failed",
        "details": "engine detail",
    }


def test_submit_wraps_unexpected_errors(client: TestClient, tester_mock: Mock) -> None:
    tester_mock.run.side_effect = RuntimeError("boom")

    response = client.post("/test", json={"url": "https://example.com"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "UNKNOWN_ERROR"
    assert body["details"] == "boom"


def test_failed_run_is_recorded(client: TestClient, tester_mock: Mock) -> None:
    tester_mock.run.side_effect = AccessibilityTestError("Too slow", ErrorCode.TIMEOUT_ERROR)

    client.post("/test", json={"url": "https://slow.example.com"})
    runs = client.get("/runs").json()

    assert len(runs) == 1
    assert runs[0]["status"] == "failed"
    assert runs[0]["errorCode"] == "TIMEOUT_ERROR"
    assert runs[0]["url"] == "https://slow.example.com"


def test_storage_failure_is_recorded(
    monkeypatch,
    client: TestClient,
    tester_mock: Mock,
    store: ReportStore,
    sample_result: TestRunResult,
) -> None:
    tester_mock.run.return_value = sample_result
    monkeypatch.setattr(store, "save", Mock(side_effect=OSError("No space left on device")))

    response = client.post("/test", json={"url": "https://example.com"})
    runs = client.get("/runs").json()

    assert response.status_code == 500
    assert response.json()["code"] == "UNKNOWN_ERROR"
    assert response.json()["details"] == "No space left on device"
    assert runs[0]["status"] == "failed"
    assert runs[0]["errorCode"] == "UNKNOWN_ERROR"


def test_export_unknown_report(client: TestClient, generator_mock: Mock) -> None:
    response = client.get("/export-pdf/report-0")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"] == "Report not found"
    generator_mock.render.assert_not_called()


def test_export_streams_pdf_then_cleans_up(
    client: TestClient,
    generator_mock: Mock,
    store: ReportStore,
    sample_result: TestRunResult,
) -> None:
    report_id = store.save(sample_result)

    response = client.get(f"/export-pdf/{report_id}")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "accessibility-report-" in response.headers["content-disposition"]
    assert response.content == b"%PDF-1.4 test document"
    generator_mock.render.assert_awaited_once_with(sample_result)
    assert not store.exists(report_id)
    assert list(store.reports_dir.glob("*.pdf")) == []


def test_export_is_single_use(
    client: TestClient,
    store: ReportStore,
    sample_result: TestRunResult,
) -> None:
    report_id = store.save(sample_result)

    assert client.get(f"/export-pdf/{report_id}").status_code == 200
    assert client.get(f"/export-pdf/{report_id}").status_code == 404


def test_export_marks_run_exported(
    client: TestClient,
    tester_mock: Mock,
    sample_result: TestRunResult,
) -> None:
    tester_mock.run.return_value = sample_result
    report_id = client.post("/test", json={"url": "https://example.com"}).json()["reportId"]

    client.get(f"/export-pdf/{report_id}")
    run = client.get(f"/runs/{report_id}").json()

    assert run["status"] == "exported"
    assert run["exportedAt"] is not None


def test_export_render_failure(
    client: TestClient,
    generator_mock: Mock,
    store: ReportStore,
    sample_result: TestRunResult,
) -> None:
    generator_mock.render.side_effect = RuntimeError("chromium missing")
    report_id = store.save(sample_result)

    response = client.get(f"/export-pdf/{report_id}")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "RENDER_ERROR"
    assert body["error"] == "Failed to generate PDF report: chromium missing"
    assert store.exists(report_id)


def test_unknown_run_status(client: TestClient) -> None:
    response = client.get("/runs/report-0")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
