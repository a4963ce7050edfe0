"""
Conversion of Prometheus query API results into frames.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Sequence, Tuple

from datasources.exceptions import ParseError
from engine.frames import Field, FieldKind, Frame, FrameType
from engine.normalize.values import from_epoch, is_number, string_map, to_float


def series_name(metric: Dict[str, str]) -> str:
    if "__name__" in metric:
        return metric["__name__"]
    if "instance" in metric:
        return metric["instance"]
    return "series"


def _timestamp(ts: Any) -> datetime:
    if not is_number(ts):
        raise ParseError(f"invalid timestamp format: {ts!r}")
    try:
        return from_epoch(float(ts))
    except (OverflowError, OSError, ValueError) as exc:
        raise ParseError(f"invalid timestamp format: {ts!r}") from exc


def _sample(pair: Sequence[Any]) -> Tuple[datetime, float]:
    when, raw = _timestamp(pair[0]), pair[1]
    if not isinstance(raw, str):
        raise ParseError(f"invalid value format: {raw!r}")
    value = to_float(raw)
    if value is None:
        raise ParseError(f"failed to parse value: {raw!r}")
    return when, value


def _series_frame(metric: Dict[str, str], samples: List[Tuple[datetime, float]]) -> Frame:
    time_field = Field("time", FieldKind.time, [ts for ts, _ in samples])
    value_field = Field(
        "value",
        FieldKind.number,
        [v for _, v in samples],
        labels=dict(metric),
        display_name=series_name(metric),
    )
    return Frame(fields=[time_field, value_field], type=FrameType.timeseries)


def _scalar_frame(data: Dict[str, Any]) -> List[Frame]:
    result = data.get("result")
    if not isinstance(result, list) or len(result) < 2:
        raise ParseError("invalid instant query response")
    if data.get("resultType") == "string":
        fields = [
            Field("time", FieldKind.time, [_timestamp(result[0])]),
            Field("value", FieldKind.string, [str(result[1])], display_name="string"),
        ]
        return [Frame(fields=fields, type=FrameType.timeseries)]
    return [_series_frame({}, [_sample(result)])]


def to_frames(data: Dict[str, Any], is_range: bool) -> List[Frame]:
    """One frame per result series; range series keep every sample in input order."""
    if data.get("resultType") in ("scalar", "string"):
        return _scalar_frame(data)

    result = data.get("result") or []
    if not isinstance(result, list):
        raise ParseError("unexpected Prometheus result shape")

    frames: List[Frame] = []
    for series in result:
        if not isinstance(series, dict):
            raise ParseError("unexpected Prometheus series shape")
        metric = string_map(series.get("metric"), "series labels")

        if is_range:
            values = series.get("values") or []
            samples = [_sample(pair) for pair in values if isinstance(pair, list) and len(pair) >= 2]
        else:
            value = series.get("value")
            if not isinstance(value, list) or len(value) < 2:
                raise ParseError("invalid instant query response")
            samples = [_sample(value)]

        frames.append(_series_frame(metric, samples))
    return frames
