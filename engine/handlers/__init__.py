from typing import Dict, Type

from engine.handlers.base import QueryHandler
from engine.handlers.logs import LogsHandler
from engine.handlers.metrics import MetricsHandler
from engine.handlers.rest import RestHandler

HANDLERS: Dict[str, Type[QueryHandler]] = {
    cls.query_type: cls for cls in (MetricsHandler, LogsHandler, RestHandler)
}

__all__ = ["HANDLERS", "QueryHandler", "MetricsHandler", "LogsHandler", "RestHandler"]
