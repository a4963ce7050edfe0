"""
Structural inference for arbitrary JSON REST responses.

A payload is classified once into a closed set of shapes and each shape has
exactly one conversion into a frame:

* array of objects        -> time series (if any row has a timestamp key) or table
* array of scalars        -> single untyped ``value`` field
* empty array             -> single empty ``value`` field
* object with data array  -> unwrap ``data`` and convert the inner array
* object                  -> one-row table, one field per key
* scalar                  -> one row stamped with the current time

Numeric fields of an array of objects are discovered from the first row and
filled by key for every row, so all fields stay row-aligned with the time
field; a row missing a key (or holding a non-numeric value there) yields
``None`` in that slot.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from config import TIMESTAMP_KEYS, settings
from engine.frames import Field, FieldKind, Frame, FrameType
from engine.normalize.values import is_number, is_numeric, parse_timestamp, to_float, utcnow


class JsonShape(str, Enum):
    array_of_objects = "array_of_objects"
    array_of_scalars = "array_of_scalars"
    empty_array = "empty_array"
    object_with_data_array = "object_with_data_array"
    object = "object"
    scalar = "scalar"


def classify(payload: Any) -> JsonShape:
    if isinstance(payload, list):
        if not payload:
            return JsonShape.empty_array
        if isinstance(payload[0], dict):
            return JsonShape.array_of_objects
        return JsonShape.array_of_scalars
    if isinstance(payload, dict):
        if isinstance(payload.get("data"), list):
            return JsonShape.object_with_data_array
        return JsonShape.object
    return JsonShape.scalar


def kind_of(value: Any) -> FieldKind:
    if is_number(value):
        return FieldKind.number
    if isinstance(value, str):
        return FieldKind.string
    return FieldKind.other


def timestamp_key(row: Dict[str, Any]) -> Optional[str]:
    for key in TIMESTAMP_KEYS:
        if key in row:
            return key
    return None


class RestNormalizer:
    """Per-call converter; ``start`` and ``step`` anchor synthesized timestamps."""

    def __init__(
        self,
        start: Optional[datetime] = None,
        step: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ):
        self.now = now or utcnow()
        self.start = start or self.now
        self.step = step or timedelta(seconds=settings.default_step_seconds)

    def to_frames(self, payload: Any) -> List[Frame]:
        return [self.to_frame(payload)]

    def to_frame(self, payload: Any) -> Frame:
        shape = classify(payload)
        if shape is JsonShape.array_of_objects:
            return self._objects_frame(payload)
        if shape is JsonShape.array_of_scalars:
            return Frame(fields=[Field("value", FieldKind.other, list(payload))])
        if shape is JsonShape.empty_array:
            return Frame(fields=[Field("value", FieldKind.other, [])])
        if shape is JsonShape.object_with_data_array:
            return self.to_frame(payload["data"])
        if shape is JsonShape.object:
            return self._object_frame(payload)
        if shape is JsonShape.scalar:
            return self._scalar_frame(payload)
        raise AssertionError(f"unhandled JSON shape {shape}")

    def _objects_frame(self, items: List[Any]) -> Frame:
        rows = [item for item in items if isinstance(item, dict)]

        keys = [k for k, v in rows[0].items() if k not in TIMESTAMP_KEYS and is_numeric(v)]
        value_fields = [Field(k, FieldKind.number) for k in keys]

        times: List[datetime] = []
        has_time = False
        for idx, row in enumerate(rows):
            ts_key = timestamp_key(row)
            if ts_key is not None:
                has_time = True
                times.append(parse_timestamp(row[ts_key], now=self.now))
            else:
                times.append(self.start + idx * self.step)

            for f in value_fields:
                f.append(to_float(row.get(f.name)))

        if has_time:
            return Frame(
                fields=[Field("time", FieldKind.time, times), *value_fields],
                type=FrameType.timeseries,
            )
        return Frame(fields=value_fields, type=FrameType.table)

    def _object_frame(self, obj: Dict[str, Any]) -> Frame:
        fields = [Field(k, kind_of(v), [v]) for k, v in obj.items()]
        return Frame(fields=fields, type=FrameType.table)

    def _scalar_frame(self, value: Any) -> Frame:
        return Frame(
            fields=[
                Field("time", FieldKind.time, [self.now]),
                Field("value", kind_of(value), [value]),
            ],
            type=FrameType.timeseries,
        )
