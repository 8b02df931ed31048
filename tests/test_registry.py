"""
Tests for the code registry: loading, reconciliation, validation.
"""

from apps.backend.services.vouchers.ledger_store import LedgerStore
from apps.backend.services.vouchers.registry import CodeRegistry


class TestLoad:
    def test_load_is_idempotent(self, make_service):
        svc = make_service("A1,A2")
        assert svc.load() == 2
        assert svc.load() == 2
        assert svc.registry.source == "inline"

    def test_load_from_file(self, make_service, tmp_path):
        path = tmp_path / "codes.csv"
        path.write_text("F1\nF2\nF3\n")
        svc = make_service(inline_codes=None, codes_file=str(path))
        assert svc.load() == 3
        assert svc.validate("F3").exists

    def test_sample_fallback_when_no_source(self, make_service):
        svc = make_service(inline_codes=None)
        assert svc.load() == 11
        assert svc.registry.source == "sample"
        assert svc.validate("valid").exists

    def test_operations_load_lazily(self, make_service):
        svc = make_service("A1")
        assert not svc.registry.loaded
        assert svc.validate("A1").exists
        assert svc.registry.loaded

    def test_reconciles_with_ledger(self, make_service, write_ledger):
        write_ledger(["ABC123", "NOT-LOADED"])
        svc = make_service("ABC123,XYZ")
        svc.load()

        result = svc.validate("ABC123")
        assert result.exists and result.redeemed
        assert not svc.validate("XYZ").redeemed
        assert not svc.validate("NOT-LOADED").exists

    def test_reconciled_record_has_timestamp(self, ledger_path, write_ledger):
        write_ledger(["A1"])
        registry = CodeRegistry(LedgerStore(ledger_path), inline_codes="A1")
        registry.load()
        record = registry.record_for("A1")
        assert record.redeemed_at is not None

    def test_corrupt_ledger_does_not_block_load(self, make_service, ledger_path):
        with open(ledger_path, "w") as f:
            f.write("[[[")
        svc = make_service("A1")
        assert svc.load() == 1
        assert not svc.validate("A1").redeemed


class TestValidate:
    def test_unknown_codes(self, service):
        for code in ("", "   ", "NOPE", None):
            result = service.validate(code)
            assert result.exists is False
            assert result.redeemed is False

    def test_trims_whitespace(self, service):
        assert service.validate("  A1\n").exists

    def test_case_sensitive(self, service):
        assert not service.validate("a1").exists

    def test_reservation_does_not_change_validation(self, service):
        service.reserve("A1", "alice")
        assert service.validate("A1").to_dict() == {"exists": True, "redeemed": False}

    def test_validate_has_no_side_effects(self, service, ledger_path):
        service.validate("A1")
        record = service.registry.record_for("A1")
        assert record.status == "active"
        assert record.reserved_by is None

    def test_counts(self, service):
        service.redeem("A1")
        assert service.registry.counts() == {"total": 2, "redeemed": 1, "active": 1}
