"""
Response models for API endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from engine.health import HealthResult
from engine.router import QueryResult


class FieldModel(BaseModel):
    name: str
    type: str
    values: List[Any]
    labels: Optional[Dict[str, str]] = None
    config: Optional[Dict[str, Any]] = None


class FrameModel(BaseModel):
    name: str = ""
    meta: Dict[str, Any] = Field(default_factory=dict)
    fields: List[FieldModel]
    labels: Optional[Dict[str, str]] = None


class DataResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    frames: Optional[List[FrameModel]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = Field(default=None, alias="errorKind")


class QueryDataResponse(BaseModel):
    results: Dict[str, DataResponseModel]

    @classmethod
    def from_result(cls, result: QueryResult) -> "QueryDataResponse":
        return cls.model_validate({"results": {ref_id: r.to_dict() for ref_id, r in result.items()}})


class HealthCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: str
    error_kind: Optional[str] = Field(default=None, alias="errorKind")

    @classmethod
    def from_result(cls, result: HealthResult) -> "HealthCheckResponse":
        return cls(status=result.status.value, message=result.message, error_kind=result.error_kind)
