"""Error handling decorators"""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from .base import ApplicationError, ErrorLevel
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")

ErrorTranslator = Callable[[Exception], ApplicationError]


def _log_failure(func_name: str, error: Exception, level: ErrorLevel) -> None:
    context: dict[str, Any] = {"function": func_name, "error_type": type(error).__name__}
    if isinstance(error, ApplicationError):
        context["error_code"] = error.code.value
        context["status"] = error.status_code
        context["details"] = error.details.model_dump(mode="json")
    logger.log(level.to_logging_level(), f"Error in {func_name}: {error!s}", error=error, **context)


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
    translate: ErrorTranslator | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator for handling errors in functions.

    Args:
        error_level: Severity used for errors that are not ApplicationErrors
        reraise: Whether to re-raise the error after logging it
        translate: Optional mapping from foreign exceptions to ApplicationErrors;
            the translated error is the one logged and raised

    Returns:
        Decorated function with error handling
    """

    def handle(func_name: str, error: Exception) -> ApplicationError | Exception:
        if translate is not None and not isinstance(error, ApplicationError):
            translated = translate(error)
            translated.__cause__ = error
            error = translated
        level = error.level if isinstance(error, ApplicationError) else error_level
        _log_failure(func_name, error, level)
        return error

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        # Capture the original signature to preserve it
        original_signature = inspect.signature(func)

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                try:
                    return await cast("Callable[P, Awaitable[T]]", func)(*args, **kwargs)
                except Exception as e:
                    handled = handle(func.__name__, e)
                    if reraise:
                        if handled is e:
                            raise
                        raise handled from e
                    return cast("T", None)

            # Explicitly set the signature on the wrapper to match the original function
            async_wrapper.__signature__ = original_signature  # type: ignore
            return cast("Callable[P, T]", async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handled = handle(func.__name__, e)
                if reraise:
                    if handled is e:
                        raise
                    raise handled from e
                return cast("T", None)

        sync_wrapper.__signature__ = original_signature  # type: ignore
        return sync_wrapper

    return decorator
