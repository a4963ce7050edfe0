"""
Scalar coercions used while normalizing loosely typed JSON payloads.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from config import EPOCH_MILLIS_THRESHOLD
from datasources.exceptions import ParseError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_float_strict(text: str) -> Optional[float]:
    # python's float() tolerates padding and digit separators, JSON numbers do not
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    if is_number(value):
        return True
    if isinstance(value, str):
        return _parse_float_strict(value) is not None
    return False


def to_float(value: Any) -> Optional[float]:
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        return _parse_float_strict(value)
    return None


def from_epoch(value: float) -> datetime:
    """Seconds or milliseconds since the epoch, split at ``EPOCH_MILLIS_THRESHOLD``."""
    if value > EPOCH_MILLIS_THRESHOLD:
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=timezone.utc)


_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(?:([Zz])|([+-])(\d{2}):(\d{2}))\Z",
    re.ASCII,
)


def parse_rfc3339(text: str) -> Optional[datetime]:
    """Strict RFC 3339 date-time; any fraction length, truncated to microseconds."""
    m = _RFC3339.match(text)
    if m is None:
        return None
    year, month, day, hour, minute, second = (int(g) for g in m.group(1, 2, 3, 4, 5, 6))
    micros = int((m.group(7) or "0")[:6].ljust(6, "0"))
    try:
        if m.group(8):
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(m.group(10)), minutes=int(m.group(11)))
            tz = timezone(-offset if m.group(9) == "-" else offset)
        return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def string_map(value: Any, what: str) -> Dict[str, str]:
    """Label sets must be string-to-string; anything else fails the query."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"invalid {what}: expected an object")
    for k, v in value.items():
        if not isinstance(v, str):
            raise ParseError(f"invalid {what}: label {k!r} has non-string value {v!r}")
    return dict(value)


def parse_timestamp(value: Any, now: Optional[datetime] = None) -> datetime:
    """Best-effort timestamp parsing; falls back to ``now`` instead of failing."""
    try:
        if isinstance(value, str):
            parsed = parse_rfc3339(value)
            if parsed is not None:
                return parsed
            number = _parse_float_strict(value)
            if number is not None and math.isfinite(number):
                return from_epoch(number)
        elif is_number(value) and math.isfinite(value):
            return from_epoch(float(value))
    except (OverflowError, OSError, ValueError):
        return now or utcnow()
    return now or utcnow()
