"""
Per-instance data source configuration: backend URLs, REST headers and credentials.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

log = logging.getLogger(__name__)

# secure values that replace their plain counterparts when present
SECURE_KEYS = ("apiKey", "basicAuthPass", "bearerToken")


class DataSourceConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    prometheus_url: str = Field(default="", alias="prometheusUrl")
    loki_url: str = Field(default="", alias="lokiUrl")
    rest_url: str = Field(default="", alias="restUrl")

    api_key: str = Field(default="", alias="apiKey")
    basic_auth_user: str = Field(default="", alias="basicAuthUser")
    basic_auth_pass: str = Field(default="", alias="basicAuthPass")
    bearer_token: str = Field(default="", alias="bearerToken")

    rest_headers: Dict[str, str] = Field(default_factory=dict, alias="restHeaders")

    @field_validator("prometheus_url", "loki_url", "rest_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> str:
        return str(v or "").strip().rstrip("/")

    @field_validator("api_key", "basic_auth_user", "basic_auth_pass", "bearer_token", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else str(v)

    @field_validator("rest_headers", mode="before")
    @classmethod
    def none_to_dict(cls, v: Optional[Dict[str, str]]) -> Dict[str, str]:
        return dict(v or {})

    @property
    def has_any_url(self) -> bool:
        return bool(self.prometheus_url or self.loki_url or self.rest_url)

    @classmethod
    def from_instance_settings(
        cls,
        json_data: Union[str, bytes, Mapping[str, Any], None],
        secure_json_data: Optional[Mapping[str, str]] = None,
    ) -> "DataSourceConfig":
        """Build a config from plain instance JSON plus decrypted secure values.

        Secure ``apiKey``, ``basicAuthPass`` and ``bearerToken`` override the
        plain fields. Unparseable plain JSON is logged and defaults are used.
        """
        raw: Dict[str, Any] = {}
        if isinstance(json_data, (str, bytes)):
            try:
                decoded = json.loads(json_data or "{}")
                raw = decoded if isinstance(decoded, dict) else {}
            except ValueError as exc:
                log.warning("failed to parse instance JSON data, using defaults: %s", exc)
        elif json_data:
            raw = dict(json_data)

        for key in SECURE_KEYS:
            value = (secure_json_data or {}).get(key)
            if value is not None:
                raw[key] = value

        try:
            config = cls.model_validate(raw)
        except ValidationError as exc:
            log.warning("invalid instance JSON data, using defaults: %s", exc)
            config = cls()

        log.info(
            "data source configured prometheusUrl=%s lokiUrl=%s restUrl=%s",
            config.prometheus_url,
            config.loki_url,
            config.rest_url,
        )
        return config


class DataSourceSettings(BaseSettings):
    prometheus_url: str = ""
    loki_url: str = ""
    rest_url: str = ""
    api_key: str = ""
    basic_auth_user: str = ""
    basic_auth_pass: str = ""
    bearer_token: str = ""
    rest_headers: Dict[str, str] = Field(default_factory=dict)

    model_config = {"env_prefix": "CONNECT_", "extra": "ignore"}

    def to_config(self) -> DataSourceConfig:
        return DataSourceConfig(
            prometheus_url=self.prometheus_url,
            loki_url=self.loki_url,
            rest_url=self.rest_url,
            api_key=self.api_key,
            basic_auth_user=self.basic_auth_user,
            basic_auth_pass=self.basic_auth_pass,
            bearer_token=self.bearer_token,
            rest_headers=self.rest_headers,
        )
