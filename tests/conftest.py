"""
Pytest configuration and fixtures for Voucher Desk tests.
"""

import json

import pytest
from fastapi.testclient import TestClient

from apps.backend.main import create_app
from apps.backend.services.settings import Settings
from apps.backend.services.stats.cashier_stats import CashierStats
from apps.backend.services.vouchers.voucher_service import VoucherService


class FakeClock:
    """Manually advanced clock for reservation TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger_path(tmp_path):
    return str(tmp_path / "redeemed.json")


@pytest.fixture
def stats_path(tmp_path):
    return str(tmp_path / "stats.json")


@pytest.fixture
def write_ledger(ledger_path):
    """Seed the ledger file with a list of codes."""
    def _write(codes):
        with open(ledger_path, "w", encoding="utf-8") as f:
            json.dump(list(codes), f)
    return _write


@pytest.fixture
def read_ledger(ledger_path):
    def _read():
        with open(ledger_path, "r", encoding="utf-8") as f:
            return json.load(f)
    return _read


@pytest.fixture
def make_service(ledger_path, clock, tmp_path):
    """Build a VoucherService over tmp files; codes default to A1, A2."""
    def _make(inline_codes="A1,A2", codes_file=None, ttl=120, path=None):
        return VoucherService(
            ledger_path=path or ledger_path,
            inline_codes=inline_codes,
            codes_file=codes_file or str(tmp_path / "missing-codes.csv"),
            reservation_ttl_seconds=ttl,
            clock=clock,
        )
    return _make


@pytest.fixture
def service(make_service):
    svc = make_service()
    svc.load()
    return svc


@pytest.fixture
def settings(tmp_path, ledger_path, stats_path):
    return Settings(
        inline_codes="COCA001,COCA002,COCA003",
        codes_file=str(tmp_path / "codes.csv"),
        ledger_path=ledger_path,
        stats_path=stats_path,
        session_secret="test-secret",
        cashier_credentials={"alice": "1111", "bob": "2222"},
        request_logging=False,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings, stats=CashierStats(settings.stats_path))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login():
    def _login(c, cashier_id="alice", pin="1111"):
        res = c.post("/api/login", json={"cashier_id": cashier_id, "pin": pin})
        assert res.status_code == 200, res.text
        return res
    return _login


@pytest.fixture
def second_client(client, settings):
    """Independent cookie jar against the same app instance."""
    with TestClient(client.app) as c:
        yield c
