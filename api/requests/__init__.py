from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from datasources.data_config import DataSourceConfig


class InstanceRequest(BaseModel):
    """Carries the data source instance either as a resolved config snapshot
    or as raw instance settings (plain JSON plus decrypted secure values).
    Neither means the environment-configured default instance."""

    model_config = ConfigDict(populate_by_name=True)

    config: Optional[DataSourceConfig] = None
    json_data: Optional[Dict[str, Any]] = Field(default=None, alias="jsonData")
    secure_json_data: Optional[Dict[str, str]] = Field(default=None, alias="secureJsonData")


class QueryDataRequest(InstanceRequest):
    queries: List[Dict[str, Any]]


class HealthCheckRequest(InstanceRequest):
    pass
