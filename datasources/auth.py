"""
Credential injection for outbound data source requests.

Exactly one scheme is chosen per request, in fixed precedence:
bearer token, then API key, then basic auth, then none.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from base64 import b64encode
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, MutableMapping, Optional

from config import settings
from datasources.data_config import DataSourceConfig


class AuthScheme(str, Enum):
    bearer = "bearer"
    api_key = "api_key"
    basic = "basic"
    none = "none"


@dataclass(frozen=True)
class AuthDecision:
    scheme: AuthScheme
    headers: Dict[str, str] = field(default_factory=dict)


def _basic_header(username: str, password: str) -> str:
    token = b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def resolve_auth(config: DataSourceConfig, api_key_header: Optional[str] = None) -> AuthDecision:
    if config.bearer_token:
        return AuthDecision(AuthScheme.bearer, {"Authorization": f"Bearer {config.bearer_token}"})
    if config.api_key:
        return AuthDecision(AuthScheme.api_key, {api_key_header or settings.api_key_header: config.api_key})
    if config.basic_auth_user and config.basic_auth_pass:
        return AuthDecision(
            AuthScheme.basic,
            {"Authorization": _basic_header(config.basic_auth_user, config.basic_auth_pass)},
        )
    return AuthDecision(AuthScheme.none)


def apply_auth(headers: MutableMapping[str, str], config: DataSourceConfig) -> MutableMapping[str, str]:
    """Set the chosen auth header on ``headers``, replacing any same-named header."""
    decision = resolve_auth(config)
    for name, value in decision.headers.items():
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value
    return headers
