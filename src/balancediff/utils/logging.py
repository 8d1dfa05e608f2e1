from __future__ import annotations
import logging
import reprlib
from functools import wraps
from typing import Any, Callable

from rich.console import Console
from rich.logging import RichHandler

_short = reprlib.Repr()
_short.maxstring = 60
_short.maxother = 60
_short.maxlist = 4
_short.maxdict = 4


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log function calls at DEBUG level with basic error logging.

    Argument and result reprs are truncated; source texts can be large.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Calling %s args=%s kwargs=%s", func.__qualname__, _short.repr(args), _short.repr(kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.exception("Error in %s: %s", func.__qualname__, e)
                raise
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s returned %s", func.__qualname__, _short.repr(result))
            return result

        return _wrapper

    return _decorator


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route the package's log records through rich (DEBUG when verbose, else WARNING)."""
    handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    package_logger = logging.getLogger("balancediff")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


__all__ = ["log_calls", "configure_logging"]
