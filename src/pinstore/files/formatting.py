from __future__ import annotations

import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_KB = 1024
_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024

# largest value a BSON int64 counter can hold
MAX_SIZE_BYTES = 2**63 - 1


def parse_size(raw: Any) -> Optional[int]:
    """Leading-integer parse of a size value: ``" 42"`` and ``"42abc"`` give 42, ``"abc"`` gives None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


def format_size(raw: Any) -> Any:
    """Human readable size (B/KB/MB/GB, two decimals). Unparseable input is returned unchanged."""
    size = parse_size(raw)
    if size is None:
        return raw
    if size < _KB:
        return f"{size} B"
    if size < _MB:
        return f"{size / _KB:.2f} KB"
    if size < _GB:
        return f"{size / _MB:.2f} MB"
    return f"{size / _GB:.2f} GB"
