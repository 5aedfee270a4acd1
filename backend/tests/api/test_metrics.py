"""
Metrics instrumentation tests.
"""

import pytest
from fastapi import Response

from csrms.core.metrics import record_notification, record_side_effect_failure
from csrms.main import app
from tests.fakes import metric_value


@app.get("/__test-error")
async def trigger_error():
    return Response(status_code=500)


@pytest.mark.asyncio
async def test_http_metrics_and_request_id(api_client):
    labels = {"method": "GET", "path": "/api/v1/health/liveness", "status": "200"}
    before = metric_value("csrms_http_requests_total", labels)

    response = await api_client.get("/api/v1/health/liveness")

    after = metric_value("csrms_http_requests_total", labels)
    assert after == pytest.approx(before + 1)
    assert "X-Request-ID" in response.headers
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed(api_client):
    response = await api_client.get(
        "/api/v1/health/liveness", headers={"X-Request-ID": "trace-42"}
    )
    assert response.headers["X-Request-ID"] == "trace-42"


@pytest.mark.asyncio
async def test_path_templates_keep_label_cardinality_low(api_client):
    labels = {"method": "GET", "path": "/api/v1/request/{request_id}", "status": "404"}
    before = metric_value("csrms_http_requests_total", labels)

    await api_client.get("/api/v1/request/REQAAAA0001")
    await api_client.get("/api/v1/request/REQAAAA0002")

    assert metric_value("csrms_http_requests_total", labels) == pytest.approx(before + 2)


@pytest.mark.asyncio
async def test_http_error_metrics(api_client):
    total_labels = {"method": "GET", "path": "/__test-error", "status": "500"}
    error_labels = total_labels.copy()

    total_before = metric_value("csrms_http_requests_total", total_labels)
    errors_before = metric_value("csrms_http_request_errors_total", error_labels)

    response = await api_client.get("/__test-error")

    total_after = metric_value("csrms_http_requests_total", total_labels)
    errors_after = metric_value("csrms_http_request_errors_total", error_labels)

    assert response.status_code == 500
    assert total_after == pytest.approx(total_before + 1)
    assert errors_after == pytest.approx(errors_before + 1)


def test_notification_and_side_effect_counters():
    sent = {"type": "System", "outcome": "sent"}
    before = metric_value("csrms_notifications_dispatched_total", sent)
    record_notification("System", "sent")
    assert metric_value("csrms_notifications_dispatched_total", sent) == pytest.approx(
        before + 1
    )

    effect = {"effect": "notification"}
    before = metric_value("csrms_side_effect_failures_total", effect)
    record_side_effect_failure("notification")
    assert metric_value("csrms_side_effect_failures_total", effect) == pytest.approx(
        before + 1
    )


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_counters(api_client):
    response = await api_client.get("/metrics/")
    assert response.status_code == 200
    assert "csrms_http_requests_total" in response.text
