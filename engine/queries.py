"""
Query models: a tagged union over the metrics, logs and REST query variants.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import QUERY_TYPE_LOKI, QUERY_TYPE_PROMETHEUS, QUERY_TYPE_REST
from datasources.exceptions import ConfigurationError, ParseError, UnsupportedQueryTypeError


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class TimeRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: datetime = Field(alias="from")
    to: datetime

    @field_validator("from_", "to")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return _utc(v)

    @property
    def is_instant(self) -> bool:
        return self.from_ == self.to


class BaseQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    ref_id: str = Field(alias="refId")
    query_type: str = Field(alias="queryType")
    time_range: TimeRange = Field(alias="timeRange")
    interval_ms: Optional[float] = Field(default=None, alias="intervalMs", ge=0)

    @property
    def interval(self) -> Optional[timedelta]:
        if not self.interval_ms:
            return None
        return timedelta(milliseconds=self.interval_ms)

    def require_payload(self) -> None:
        raise NotImplementedError


class MetricsQuery(BaseQuery):
    query_type: Literal["prometheus"] = Field(alias="queryType")
    prom_ql: str = Field(default="", alias="promQL")

    def require_payload(self) -> None:
        if not self.prom_ql.strip():
            raise ConfigurationError("PromQL query is required")


class LogsQuery(BaseQuery):
    query_type: Literal["loki"] = Field(alias="queryType")
    log_ql: str = Field(default="", alias="logQL")

    def require_payload(self) -> None:
        if not self.log_ql.strip():
            raise ConfigurationError("LogQL query is required")


class RestQuery(BaseQuery):
    query_type: Literal["rest"] = Field(alias="queryType")
    rest_endpoint: str = Field(default="", alias="restEndpoint")
    rest_method: str = Field(default="", alias="restMethod")
    rest_headers: Dict[str, str] = Field(default_factory=dict, alias="restHeaders")
    rest_body: str = Field(default="", alias="restBody")

    @field_validator("rest_endpoint", "rest_method", "rest_body", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    @field_validator("rest_headers", mode="before")
    @classmethod
    def none_to_dict(cls, v: Optional[Dict[str, str]]) -> Dict[str, str]:
        return dict(v or {})

    def require_payload(self) -> None:
        if not self.rest_endpoint.strip():
            raise ConfigurationError("REST endpoint is required")


Query = Union[MetricsQuery, LogsQuery, RestQuery]

QUERY_MODELS: Dict[str, Type[BaseQuery]] = {
    QUERY_TYPE_PROMETHEUS: MetricsQuery,
    QUERY_TYPE_LOKI: LogsQuery,
    QUERY_TYPE_REST: RestQuery,
}


def parse_query(raw: Mapping[str, Any], ref_id: Optional[str] = None) -> Query:
    """Validate one raw query object into its variant model.

    The type tag is inspected before validation so an unknown tag is reported
    as such rather than as a schema error.
    """
    if not isinstance(raw, Mapping):
        raise ParseError("failed to parse query: expected a JSON object")
    query_type = raw.get("queryType")
    model = QUERY_MODELS.get(query_type) if isinstance(query_type, str) else None
    if model is None:
        raise UnsupportedQueryTypeError(query_type)

    data = dict(raw)
    if ref_id is not None:
        data["refId"] = ref_id
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"failed to parse query: {exc}") from exc
