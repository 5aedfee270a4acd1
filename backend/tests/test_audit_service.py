"""Tests for the audit recorder."""

from datetime import datetime, timezone

import pytest

from csrms.models.audit import AuditAction, AuditLog
from csrms.services.audit import AuditService
from csrms.utils.identifiers import ID_PATTERN
from tests.fakes import FakeResult, metric_value


@pytest.mark.asyncio
async def test_log_event_persists_entry(fake_database):
    service = AuditService(fake_database)

    recorded = await service.log_event(
        "citizen-1",
        AuditAction.SUBMIT_REQUEST,
        "Service request submitted: Pothole on Main St",
        "203.0.113.9",
    )

    assert recorded is True
    (entry,) = fake_database.committed_of(AuditLog)
    assert ID_PATTERN.fullmatch(entry.log_id)
    assert entry.log_id.startswith("LOG")
    assert entry.user_id == "citizen-1"
    assert entry.action == "SUBMIT_REQUEST"
    assert entry.details == "Service request submitted: Pothole on Main St"
    assert entry.ip_address == "203.0.113.9"
    assert entry.timestamp.tzinfo is not None


@pytest.mark.asyncio
async def test_log_event_allows_missing_details(fake_database):
    service = AuditService(fake_database)

    assert await service.log_event("staff-7", AuditAction.UPDATE_REQUEST_STATUS) is True
    (entry,) = fake_database.committed_of(AuditLog)
    assert entry.details is None
    assert entry.ip_address is None


@pytest.mark.asyncio
async def test_log_event_swallows_store_outage(fake_database):
    labels = {"effect": "audit"}
    before = metric_value("csrms_side_effect_failures_total", labels)
    fake_database.failing_models = {AuditLog}
    service = AuditService(fake_database)

    recorded = await service.log_event("citizen-1", AuditAction.SUBMIT_REQUEST, "details")

    assert recorded is False
    assert fake_database.committed_of(AuditLog) == []
    assert metric_value("csrms_side_effect_failures_total", labels) == pytest.approx(before + 1)


@pytest.mark.asyncio
async def test_get_logs_by_user_orders_newest_first_with_limit(fake_database):
    entries = [
        AuditLog(log_id="LOGAAAA0001", user_id="citizen-1", action="SUBMIT_REQUEST"),
        AuditLog(log_id="LOGAAAA0002", user_id="citizen-1", action="SUBMIT_REQUEST"),
    ]
    fake_database.queue(FakeResult(values=entries))
    service = AuditService(fake_database)

    logs = await service.get_logs_by_user("citizen-1", limit=2)

    assert logs == entries
    stmt = fake_database.executed[0]
    assert "ORDER BY audit_logs.timestamp DESC" in str(stmt)
    assert stmt._limit == 2


@pytest.mark.asyncio
async def test_get_logs_by_action_defaults_to_one_hundred(fake_database):
    service = AuditService(fake_database)

    await service.get_logs_by_action(AuditAction.SUBMIT_REQUEST_ERROR)

    stmt = fake_database.executed[0]
    assert stmt._limit == 100
    assert "SUBMIT_REQUEST_ERROR" in stmt.compile().params.values()


@pytest.mark.asyncio
async def test_get_logs_by_date_range_is_inclusive(fake_database):
    service = AuditService(fake_database)
    start = datetime(2026, 10, 1, tzinfo=timezone.utc)
    end = datetime(2026, 10, 2, tzinfo=timezone.utc)

    await service.get_logs_by_date_range(start, end)

    sql = str(fake_database.executed[0])
    assert "audit_logs.timestamp >= " in sql
    assert "audit_logs.timestamp <= " in sql
    assert "ORDER BY audit_logs.timestamp DESC" in sql


@pytest.mark.asyncio
async def test_queries_propagate_storage_errors(fake_database):
    fake_database.queue(RuntimeError("connection refused"))
    service = AuditService(fake_database)

    with pytest.raises(RuntimeError):
        await service.get_logs_by_user("citizen-1")
