from __future__ import annotations
from typing import Dict, Any

from apps.backend.services.vouchers.voucher_service import VoucherService


def ledger_healthcheck(vouchers: VoucherService) -> Dict[str, Any]:
    checks: Dict[str, Any] = {"registry": False, "ledger_readable": False, "ledger_in_sync": False}

    try:
        checks["registry"] = len(vouchers.registry) > 0
    except Exception as e:
        checks["registry_error"] = str(e)

    problem = vouchers.ledger_store.check()
    checks["ledger_readable"] = problem is None
    if problem:
        checks["ledger_error"] = problem

    coordinator = vouchers.coordinator
    checks["ledger_in_sync"] = not coordinator.unpersisted and not coordinator.ledger_stale
    if coordinator.unpersisted:
        checks["unpersisted"] = sorted(coordinator.unpersisted)
    if coordinator.ledger_stale:
        checks["stale_after_reset"] = True

    ok = checks["registry"] and checks["ledger_readable"] and checks["ledger_in_sync"]
    return {"ok": ok, "checks": checks, "ledger": vouchers.ledger_store.status()}
