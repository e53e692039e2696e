"""Uniform success/failure results returned by every manager operation."""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

from sqlalchemy import exc as sa_exc

from classes.errors import QuizPlatformError, StoreTimeoutError, UpstreamError

logger = logging.getLogger(__name__)

_TIMEOUT_MARKERS = ("timed out", "timeout", "lost connection", "database is locked", "lock wait")


@dataclass
class ServiceResult:
    success: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    status: int = 200

    @classmethod
    def ok(cls, data=None):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error):
        return cls(success=False, error=error.message, code=error.code, status=error.status)

    def to_dict(self):
        return {"success": self.success, "data": self.data, "error": self.error}


def is_timeout(error):
    if isinstance(error, sa_exc.TimeoutError):
        return True
    if isinstance(error, sa_exc.OperationalError):
        text = str(error.orig if error.orig is not None else error).lower()
        return any(marker in text for marker in _TIMEOUT_MARKERS)
    return False


def translate_error(error):
    """Map any exception raised inside a manager to a platform error."""
    if isinstance(error, QuizPlatformError):
        return error
    if is_timeout(error):
        return StoreTimeoutError()
    if isinstance(error, sa_exc.SQLAlchemyError):
        return UpstreamError()
    return UpstreamError("Unexpected error while processing the request")


def service_call(method):
    """Run a manager method and convert its outcome into a ServiceResult.

    The wrapped method returns plain data or raises; the session is rolled back
    on any failure so the caller never sees a half-written transaction.
    """
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            data = method(self, *args, **kwargs)
        except QuizPlatformError as error:
            self.session.rollback()
            logger.warning("%s failed: %s", method.__qualname__, error.message)
            return ServiceResult.fail(error)
        except Exception as error:
            self.session.rollback()
            translated = translate_error(error)
            if isinstance(translated, StoreTimeoutError):
                logger.error("%s timed out: %s", method.__qualname__, error)
            else:
                logger.exception("%s failed unexpectedly", method.__qualname__)
            return ServiceResult.fail(translated)
        if isinstance(data, ServiceResult):
            return data
        return ServiceResult.ok(data)

    return wrapper
