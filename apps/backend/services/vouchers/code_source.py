"""
Code sources for the registry, tried in priority order:

1. inline comma-separated list
2. newline-delimited file
3. built-in sample set

A source that is missing, unreadable, or yields no codes is skipped.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

log = logging.getLogger("voucherdesk.codes")

SAMPLE_CODES = [
    "COCA001", "COCA002", "COCA003", "COCA004", "COCA005",
    "COCA006", "COCA007", "COCA008", "COCA009", "COCA010",
    "valid",
]


@dataclass(frozen=True)
class LoadedCodes:
    source: str  # "inline" | "file" | "sample"
    codes: List[str]


def _clean(entries: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for raw in entries:
        code = raw.strip()
        if code and code not in seen:
            seen.add(code)
            out.append(code)
    return out


def parse_inline(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return _clean(raw.split(","))


def read_codes_file(path: Optional[str]) -> List[str]:
    if not path or not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            return _clean(f.read().splitlines())
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Skipping unreadable code file %s: %s", path, e)
        return []


def resolve_codes(inline: Optional[str] = None, path: Optional[str] = None) -> LoadedCodes:
    codes = parse_inline(inline)
    if codes:
        log.info("Loaded %d codes from inline list", len(codes))
        return LoadedCodes("inline", codes)

    codes = read_codes_file(path)
    if codes:
        log.info("Loaded %d codes from %s", len(codes), path)
        return LoadedCodes("file", codes)

    log.info("Seeded %d sample codes", len(SAMPLE_CODES))
    return LoadedCodes("sample", list(SAMPLE_CODES))
