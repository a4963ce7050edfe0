"""
Uniform columnar result model shared by every query type.

A :class:`Frame` is an ordered list of :class:`Field` columns that share row
alignment. Each field holds values of a single :class:`FieldKind`.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class FieldKind(str, Enum):
    time = "time"
    number = "number"
    string = "string"
    other = "other"


class FrameType(str, Enum):
    timeseries = "timeseries-many"
    table = "table"
    log_lines = "log-lines"


def epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(round(value.timestamp() * 1000))


@dataclass
class Field:
    name: str
    kind: FieldKind
    values: List[Any] = field(default_factory=list)
    labels: Optional[Dict[str, str]] = None
    display_name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.values)

    def append(self, value: Any) -> None:
        self.values.append(value)

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == FieldKind.time:
            values = [epoch_millis(v) if isinstance(v, datetime) else v for v in self.values]
        elif self.kind == FieldKind.number:
            # NaN and Inf have no JSON encoding
            values = [None if isinstance(v, float) and not math.isfinite(v) else v for v in self.values]
        else:
            values = list(self.values)
        out: Dict[str, Any] = {"name": self.name, "type": self.kind.value, "values": values}
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.display_name:
            out["config"] = {"displayNameFromDS": self.display_name}
        return out


@dataclass
class Frame:
    fields: List[Field] = field(default_factory=list)
    name: str = ""
    type: Optional[FrameType] = None
    labels: Optional[Dict[str, str]] = None
    custom: Optional[Dict[str, Any]] = None

    @property
    def row_count(self) -> int:
        return len(self.fields[0]) if self.fields else 0

    @property
    def is_aligned(self) -> bool:
        return len({len(f) for f in self.fields}) <= 1

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def time_field(self) -> Optional[Field]:
        for f in self.fields:
            if f.kind == FieldKind.time:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        meta: Dict[str, Any] = {}
        if self.type is not None:
            meta["type"] = self.type.value
        if self.custom:
            meta["custom"] = self.custom
        out: Dict[str, Any] = {
            "name": self.name,
            "meta": meta,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.labels:
            out["labels"] = dict(self.labels)
        return out
