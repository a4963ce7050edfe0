"""
Conversion of Loki stream results into log-line frames.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from datasources.exceptions import ParseError
from engine.frames import Field, FieldKind, Frame, FrameType
from engine.normalize.values import string_map

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def series_name(labels: Dict[str, str]) -> str:
    if "job" in labels:
        return labels["job"]
    if "instance" in labels:
        return labels["instance"]
    for value in labels.values():
        return value
    return "logs"


def parse_ns(raw: Any) -> Optional[datetime]:
    """Nanosecond epoch string to a UTC datetime (microsecond precision)."""
    try:
        ns = int(str(raw), 10)
        return _EPOCH + timedelta(microseconds=ns // 1000)
    except (TypeError, ValueError, OverflowError):
        return None


def to_frames(data: Dict[str, Any]) -> List[Frame]:
    result = data.get("result") or []
    if not isinstance(result, list):
        raise ParseError("unexpected Loki result shape")

    frames: List[Frame] = []
    for stream in result:
        if not isinstance(stream, dict):
            raise ParseError("unexpected Loki stream shape")
        labels = string_map(stream.get("stream"), "stream labels")

        times: List[datetime] = []
        lines: List[str] = []
        for entry in stream.get("values") or []:
            if not isinstance(entry, list) or len(entry) < 2:
                continue
            ts = parse_ns(entry[0])
            if ts is None:
                log.warning("failed to parse log timestamp value=%r", entry[0])
                continue
            times.append(ts)
            lines.append(str(entry[1]))

        if not times:
            continue

        frames.append(
            Frame(
                fields=[
                    Field("time", FieldKind.time, times),
                    Field("value", FieldKind.string, lines, labels=labels, display_name=series_name(labels)),
                ],
                type=FrameType.log_lines,
                custom={"labels": labels},
            )
        )
    return frames
