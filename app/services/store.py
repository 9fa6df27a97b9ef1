"""
Store boundary: SQLAlchemy errors from service methods are converted to StoreError.
"""
import functools
import logging
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from app.loader.errors import StoreError
from app.utils.metrics import store_errors_total


logger = logging.getLogger("store")


def store_operation(operation: str) -> Callable:
    """Decorator for service methods: rollback + StoreError on any DB failure."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            try:
                return func(self, *args, **kwargs)
            except SQLAlchemyError as exc:
                self.db.rollback()
                store_errors_total.labels(operation=operation).inc()
                logger.error(
                    "store_operation_failed",
                    extra={"operation": operation, "error": type(exc).__name__},
                )
                raise StoreError(operation, str(exc)) from exc
        return wrapper
    return decorator
