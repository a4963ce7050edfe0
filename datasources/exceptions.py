# datasources/exceptions.py

from typing import Optional

from config import ERROR_BODY_EXCERPT


class DataSourceError(Exception):
    kind = "DataSourceError"

    def describe(self) -> str:
        return f"{self.kind}: {self}"


class ConfigurationError(DataSourceError):
    kind = "ConfigurationError"


class TransportError(DataSourceError):
    kind = "TransportError"


class DataSourceUnavailable(TransportError):
    pass


class QueryTimeout(TransportError):
    pass


class QueryCancelled(TransportError):
    kind = "CancelledError"


class UpstreamStatusError(DataSourceError):
    kind = "UpstreamStatusError"

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = (body or "")[:ERROR_BODY_EXCERPT]
        if body:
            message = f"{message}: {self.body}"
        super().__init__(message)


class ParseError(DataSourceError):
    kind = "ParseError"


class UnsupportedQueryTypeError(DataSourceError):
    kind = "UnsupportedQueryTypeError"

    def __init__(self, query_type: object):
        self.query_type = query_type
        super().__init__(f"unknown query type: {query_type}")


class InvalidBatch(DataSourceError):
    kind = "InvalidBatch"
