"""
Per-cashier processed counters persisted as a JSON object
({"cashier_id": count, ...}).

Owned outside the voucher core: the redeem route bumps a counter after a new
redemption and the admin reset clears the file.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Dict

from apps.backend.services.storage.json_file import read_json, write_json

log = logging.getLogger("voucherdesk.stats")

DEFAULT_STATS_PATH = "stats.json"


def _as_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


class CashierStats:
    def __init__(self, path: str = DEFAULT_STATS_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, int]:
        data = read_json(self.path)
        if not isinstance(data, dict):
            return {}
        return {str(k): _as_count(v) for k, v in data.items()}

    def get_count(self, cashier_id: str) -> int:
        if not cashier_id:
            return 0
        return self._read().get(cashier_id, 0)

    def all_counts(self) -> Dict[str, int]:
        return self._read()

    def increment(self, cashier_id: str, delta: int = 1) -> int:
        """
        Add `delta` to the cashier's count and return the new value. A failed
        write is logged and the computed count is still returned.
        """
        if not cashier_id:
            return 0
        with self._lock:
            stats = self._read()
            current = stats.get(cashier_id, 0)
            stats[cashier_id] = current + int(delta)
            try:
                write_json(self.path, stats)
            except (OSError, TypeError) as e:
                log.error("Failed to write stats file %s: %s", self.path, e)
            return stats[cashier_id]

    def reset(self) -> bool:
        with self._lock:
            try:
                write_json(self.path, {})
            except (OSError, TypeError) as e:
                log.error("Failed to reset stats file %s: %s", self.path, e)
                return False
        return True
