"""
Redeemed-code ledger persisted as a JSON array of strings.

Read/write the whole set at once. A missing or malformed file reads as an
empty set; a failed write raises LedgerWriteError so the caller decides how
loudly to fail.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Dict, Iterable, Optional, Set

from apps.backend.services.storage.json_file import read_json, write_json

log = logging.getLogger("voucherdesk.ledger")

DEFAULT_LEDGER_PATH = "redeemed.json"


class LedgerWriteError(Exception):
    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write ledger {path}: {cause}")


class LedgerStore:
    def __init__(self, path: str = DEFAULT_LEDGER_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()

    def read(self) -> Set[str]:
        data = read_json(self.path)
        if data is None:
            return set()
        if not isinstance(data, list):
            log.warning("Ledger %s is not a JSON array; treating as empty", self.path)
            return set()
        return {str(x) for x in data if isinstance(x, (str, int)) and not isinstance(x, bool)}

    def check(self) -> Optional[str]:
        """
        Strict read for health checks: None when the file is absent or a JSON
        array, otherwise the reason it would be ignored.
        """
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            return f"unreadable: {e}"
        if not isinstance(data, list):
            return "not a JSON array"
        return None

    def write(self, codes: Iterable[str]) -> None:
        payload = sorted({str(c) for c in codes})
        with self._lock:
            try:
                write_json(self.path, payload)
            except (OSError, TypeError) as e:
                raise LedgerWriteError(self.path, e) from e

    def status(self) -> Dict[str, Any]:
        exists = os.path.exists(self.path)
        return {
            "path": self.path,
            "exists": exists,
            "file_size_bytes": os.path.getsize(self.path) if exists else 0,
            "redeemed_count": len(self.read()),
        }
