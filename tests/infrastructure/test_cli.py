"""CLI tests via click's CliRunner against a temporary SQLite file."""

import logging

import pytest
import structlog
from click.testing import CliRunner

from fulfillment.infrastructure.cli.main import cli


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers, root.level = handlers, level
    structlog.reset_defaults()


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    env = {
        "FULFILLMENT_DATABASE_URL": f"sqlite:///{tmp_path / 'cli.db'}",
        "FULFILLMENT_ACTOR": "tester",
        "FULFILLMENT_LOG_LEVEL": "WARNING",
    }

    def invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return invoke


def _seed_order(run):
    assert run("customer", "add", "--name", "ABC Manufacturing").exit_code == 0
    result = run(
        "order", "create", "--customer", "1", "--po", "PO-1001",
        "--item", "WG-001:Wire Guard: Standard:100:pieces",
        "--due", "2024-09-15",
    )
    assert result.exit_code == 0, result.output
    return result


class TestOrderCommands:

    def test_create_shows_order(self, run):
        result = _seed_order(run)
        assert "Order #1 created  (status=pending)" in result.output
        assert "WG-001" in result.output

    def test_ship_partial_then_full(self, run):
        _seed_order(run)
        result = run("order", "ship", "--id", "1", "--item", "1", "--qty", "40")
        assert result.exit_code == 0, result.output
        assert "Shipped 40.00 pieces of WG-001, 60.00 remaining" in result.output
        assert "status=production" in result.output

        result = run("order", "ship", "--id", "1", "--item", "1", "--qty", "60")
        assert "status=shipped" in result.output

        result = run("order", "show", "--id", "1")
        assert "fully_shipped" in result.output
        assert "shipped 60.00 on" in result.output

    def test_produce_and_stats(self, run):
        _seed_order(run)
        assert run("order", "produce", "--id", "1", "--item", "1").exit_code == 0
        result = run("stats")
        assert "In production:       1" in result.output

    def test_update_with_empty_notes_clears_them(self, run):
        _seed_order(run)
        assert run("order", "update", "--id", "1", "--notes", "fragile").exit_code == 0
        assert "Notes:    fragile" in run("order", "show", "--id", "1").output
        assert run("order", "update", "--id", "1", "--notes", "").exit_code == 0
        assert "Notes:" not in run("order", "show", "--id", "1").output

    def test_update_and_cancel(self, run):
        _seed_order(run)
        assert run("order", "update", "--id", "1", "--po", "PO-2").exit_code == 0
        assert run("order", "cancel", "--id", "1").exit_code == 0
        assert "status=cancelled" in run("order", "show", "--id", "1").output


class TestExitCodes:

    def test_validation_error(self, run):
        _seed_order(run)
        result = run("order", "ship", "--id", "1", "--item", "1", "--qty", "0")
        assert result.exit_code == 2
        assert "must be positive" in result.output

    def test_not_found(self, run):
        result = run("order", "show", "--id", "42")
        assert result.exit_code == 3
        assert "Order #42 not found" in result.output

    def test_conflict(self, run):
        _seed_order(run)
        result = run(
            "order", "create", "--customer", "1", "--po", "PO-1001",
            "--item", "X:Y:1:pieces",
        )
        assert result.exit_code == 4

    def test_over_shipment(self, run):
        _seed_order(run)
        result = run("order", "ship", "--id", "1", "--item", "1", "--qty", "100.01")
        assert result.exit_code == 5
        assert "remaining" in result.output

    def test_malformed_item(self, run):
        run("customer", "add", "--name", "ABC")
        result = run("order", "create", "--customer", "1", "--po", "P", "--item", "bad")
        assert result.exit_code == 2
        assert "PartNumber:Description:Qty:Unit" in result.output


class TestCatalogCommands:

    def test_part_add_and_duplicate(self, run):
        result = run("part", "add", "--number", "WG-001", "--description", "Wire Guard")
        assert result.exit_code == 0
        assert "Part #1 'WG-001' added" in result.output
        result = run("part", "add", "--number", "WG-001", "--description", "Again")
        assert result.exit_code == 4

    def test_deactivated_customer_cannot_order(self, run):
        run("customer", "add", "--name", "ABC")
        assert run("customer", "deactivate", "--id", "1").exit_code == 0
        result = run(
            "order", "create", "--customer", "1", "--po", "P", "--item", "A:B:1:pieces"
        )
        assert result.exit_code == 3

    def test_db_init(self, run):
        result = run("db", "init")
        assert result.exit_code == 0
        assert "up to date" in result.output
