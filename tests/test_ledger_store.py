"""
Tests for the redeemed-code ledger store.
"""

import json

import pytest

from apps.backend.services.vouchers.ledger_store import LedgerStore, LedgerWriteError


class TestLedgerRead:
    """Reading the ledger file."""

    def test_missing_file_is_empty(self, ledger_path):
        assert LedgerStore(ledger_path).read() == set()

    def test_reads_json_array(self, ledger_path, write_ledger):
        write_ledger(["ABC123", "XYZ"])
        assert LedgerStore(ledger_path).read() == {"ABC123", "XYZ"}

    def test_malformed_json_is_empty(self, ledger_path):
        with open(ledger_path, "w") as f:
            f.write("{not json")
        assert LedgerStore(ledger_path).read() == set()

    def test_non_array_is_empty(self, ledger_path):
        with open(ledger_path, "w") as f:
            json.dump({"ABC123": True}, f)
        assert LedgerStore(ledger_path).read() == set()

    def test_entries_coerced_to_strings(self, ledger_path, write_ledger):
        write_ledger([123, "A1"])
        assert LedgerStore(ledger_path).read() == {"123", "A1"}

    def test_non_scalar_entries_dropped(self, ledger_path, write_ledger):
        write_ledger(["A1", None, ["A2"], {"A3": 1}, True, 7])
        assert LedgerStore(ledger_path).read() == {"A1", "7"}


class TestLedgerCheck:
    """Strict validation used by the health endpoint."""

    def test_absent_file_passes(self, ledger_path):
        assert LedgerStore(ledger_path).check() is None

    def test_array_passes(self, ledger_path, write_ledger):
        write_ledger(["A1"])
        assert LedgerStore(ledger_path).check() is None

    def test_malformed_fails(self, ledger_path):
        with open(ledger_path, "w") as f:
            f.write("[[[ corrupt")
        assert LedgerStore(ledger_path).check().startswith("unreadable")

    def test_not_an_array_fails(self, ledger_path):
        with open(ledger_path, "w") as f:
            json.dump({"A1": True}, f)
        assert LedgerStore(ledger_path).check() == "not a JSON array"


class TestLedgerWrite:
    """Writing the ledger file."""

    def test_write_then_read(self, ledger_path, read_ledger):
        store = LedgerStore(ledger_path)
        store.write(["B", "A", "A"])
        assert read_ledger() == ["A", "B"]
        assert store.read() == {"A", "B"}

    def test_write_empty_overwrites(self, ledger_path, write_ledger, read_ledger):
        write_ledger(["A1"])
        LedgerStore(ledger_path).write([])
        assert read_ledger() == []

    def test_write_failure_raises_typed_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = LedgerStore(str(blocker / "redeemed.json"))

        with pytest.raises(LedgerWriteError) as exc:
            store.write(["A1"])
        assert isinstance(exc.value.cause, OSError)

    def test_status(self, ledger_path):
        store = LedgerStore(ledger_path)
        assert store.status()["exists"] is False
        store.write(["A1"])
        status = store.status()
        assert status["exists"] is True
        assert status["redeemed_count"] == 1
        assert status["file_size_bytes"] > 0
