import pytest
from conftest import FakeConnector, healthy_responses
from dbsniff.domain.models import CheckStatus
from dbsniff.inspector.crawler import SHOW_TABLES_SQL
from dbsniff.probes import health, security
from dbsniff.probes.registry import PROBE_GROUPS, select_groups
from dbsniff.report.orchestrator import ReportOrchestrator

def test_full_run_in_fixed_order(fake_connector):
    report = ReportOrchestrator().run(fake_connector, database="shop")

    assert report.database == "shop"
    assert report.schema_preview.total_tables == 2
    assert [g.name for g in report.groups] == ["health", "security", "performance"]
    assert not report.has_errors
    assert report.problem_count == 0

    health_rows = report.groups[0].rows
    assert [r.check for r in health_rows] == [
        "Uptime", "Active Connections", "Slow Queries", "Buffer Pool Usage", "Open Tables",
    ]
    # Every row carries a status
    assert all(isinstance(r.status, CheckStatus) for g in report.groups for r in g.rows)

def test_query_error_aborts_only_its_group():
    conn = FakeConnector(healthy_responses(), failures=[health.SLOW_QUERIES_SQL])
    report = ReportOrchestrator().run(conn)

    health_group, security_group, performance_group = report.groups
    assert health_group.aborted
    assert "slow queries" in health_group.error
    # Rows gathered before the failing check are kept, later checks never run
    assert [r.check for r in health_group.rows] == ["Uptime", "Active Connections"]
    assert health.BUFFER_POOL_SQL not in conn.executed

    assert not security_group.aborted
    assert not performance_group.aborted
    assert report.has_errors

def test_security_failure_does_not_stop_performance():
    conn = FakeConnector(healthy_responses(), failures=[security.EMPTY_PASSWORDS_SQL])
    report = ReportOrchestrator().run(conn)
    security_group = report.groups[1]
    assert security_group.aborted
    assert security_group.rows == []
    assert report.groups[2].rows[0].status == CheckStatus.PASSED

def test_schema_failure_is_recorded_and_groups_still_run():
    conn = FakeConnector(healthy_responses(), failures=[SHOW_TABLES_SQL])
    report = ReportOrchestrator().run(conn)
    assert report.schema_preview is None
    assert report.schema_error
    assert len(report.groups) == 3

def test_problem_count():
    responses = healthy_responses()
    responses[security.EMPTY_PASSWORDS_SQL] = [("a", "%"), ("b", "localhost")]
    responses[health.SLOW_QUERIES_SQL] = [("Slow_queries", "500")]
    report = ReportOrchestrator().run(FakeConnector(responses))
    assert report.problem_count == 3
    assert not report.has_errors

def test_group_selection_keeps_order():
    groups = select_groups(["performance", "health"])
    assert [g.name for g in groups] == ["health", "performance"]
    assert select_groups([]) == PROBE_GROUPS

def test_selected_groups_only(fake_connector):
    report = ReportOrchestrator(groups=select_groups(["security"]), include_schema=False).run(fake_connector)
    assert [g.name for g in report.groups] == ["security"]
    assert SHOW_TABLES_SQL not in fake_connector.executed

def test_unknown_group_rejected():
    with pytest.raises(ValueError):
        select_groups(["latency"])
