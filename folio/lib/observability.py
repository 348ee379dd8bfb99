"""Optional Logfire tracing.

Folio traces collection mutations, hook dispatch, HTTP requests and SQL
through Logfire when the ``logfire`` extra is installed and enabled in
``app.yaml``. Otherwise every helper here is a no-op and errors go to the
stdlib logger only.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from folio.config import LogfireConfig

# The configured logfire module, None while tracing is off
_logfire = None


def configure(config: LogfireConfig) -> bool:
    """Turn tracing on for ``config``. Returns whether it is now active."""
    global _logfire

    if not config.enabled:
        return False
    try:
        import logfire
    except ImportError:
        return False

    options: dict[str, Any] = {"service_name": config.service_name, "send_to_logfire": "if-token-present"}
    if config.environment:
        options["environment"] = config.environment
    if config.sample_rate != 1.0:
        options["trace_sample_rate"] = config.sample_rate
    if config.console:
        options["console"] = logfire.ConsoleOptions()

    logfire.configure(**options)
    _logfire = logfire
    return True


def is_enabled() -> bool:
    return _logfire is not None


def instrument_app(app):
    if _logfire is None:
        return app
    return _logfire.instrument_asgi(app)


def instrument_sqlalchemy(engine) -> None:
    if _logfire is not None:
        _logfire.instrument_sqlalchemy(engine=engine)


@contextmanager
def span(name: str, **attrs: Any):
    if _logfire is None:
        yield None
        return
    with _logfire.span(name, **attrs) as current:
        yield current


def exception(msg: str, **kwargs: Any) -> bool:
    """Record the active exception in Logfire.

    Returns False when tracing is off so the caller logs it instead.
    """
    if _logfire is None:
        return False
    _logfire.exception(msg, **kwargs)
    return True
