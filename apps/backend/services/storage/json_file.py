"""
Whole-file JSON persistence helpers shared by the ledger and stats stores.

Reads are forgiving: a missing, unreadable or malformed file yields None so
callers can fall back to an empty value. Writes go through a temp file in
the same directory and are swapped in with os.replace.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Optional

log = logging.getLogger("voucherdesk.storage")


def read_json(path: str) -> Optional[Any]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable JSON file %s: %s", path, e)
        return None


def write_json(path: str, data: Any) -> None:
    """Raises OSError / TypeError on failure; the original file is left untouched."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
