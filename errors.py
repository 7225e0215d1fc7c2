from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError


class BenchError(Exception):
    """Base class for errors raised by the workload driver itself."""


class FatalError(BenchError):
    """Environment or programming defect. Never counted as a dropped request."""


class ConfigurationError(FatalError):
    pass


class InvalidIdentifier(ConfigurationError):
    """An external short id is not valid UTF-8."""


class IntegrityFault(FatalError):
    """A row the handler relies on is missing (bad priming or environment)."""


class AdmissionError(FatalError):
    """take_connection() was called without a preceding READY."""


class SchemaError(FatalError):
    pass


class PoolDisconnected(BenchError):
    """The pool was shut down while requests were still being issued."""


STORE_ERRORS = (SQLAlchemyError, PoolDisconnected, OSError)


def is_store_error(exc: BaseException) -> bool:
    return isinstance(exc, STORE_ERRORS)
