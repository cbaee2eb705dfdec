from __future__ import annotations

import functools
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from pokemon_common.context import corr_scope
from pokemon_common.errors import PokemonMCPError, ToolResponse, error_response, success_response
from pokemon_common.telemetry import log_event, redact_secrets


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared helpers for MCP tool handlers
# ---------------------------------------------------------------------------


def _bound_args(fn: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    """Bind positional/keyword args to parameter names for logging."""
    try:
        bound = inspect.signature(fn).bind_partial(*args, **kwargs)
        return dict(bound.arguments)
    except TypeError:
        d: dict[str, Any] = dict(kwargs)
        if args:
            d["_args"] = list(args)
        return d


@dataclass(frozen=True)
class InstrumentConfig:
    name: str
    kind: str = "tool"


def instrument_tool(cfg: InstrumentConfig):
    """
    Decorator turning a payload-returning handler into a closed tool boundary.

    The wrapped function returns a ToolResponse: the payload as a success
    envelope, or any raised exception as an error envelope. Each call runs in
    its own correlation scope and is timed and logged.
    """

    def decorator(fn: Callable[..., dict[str, Any]]) -> Callable[..., ToolResponse]:
        fn_sig = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> ToolResponse:
            with corr_scope() as corr_id:
                t0 = time.perf_counter()
                args_for_log: dict[str, Any] = {"args": redact_secrets(_bound_args(fn, args, kwargs))}

                try:
                    response = success_response(fn(*args, **kwargs))
                except PokemonMCPError as e:
                    logger.warning("Tool %s failed (%s): %s", cfg.name, e.code, e)
                    args_for_log["error"] = {"code": e.code, "message": str(e)}
                    response = error_response(str(e))
                except Exception as e:
                    logger.exception("Tool %s raised unexpectedly", cfg.name)
                    args_for_log["error"] = {"code": "internal", "message": str(e)}
                    response = error_response(str(e))

                ms = int((time.perf_counter() - t0) * 1000)
                logger.info("Tool %s ok=%s ms=%s corr_id=%s", cfg.name, not response.is_error, ms, corr_id)
                log_event(cfg.kind, cfg.name, args_for_log, ok=not response.is_error, ms=ms, corr_id=corr_id)
                return response

        wrapper.__signature__ = fn_sig  # type: ignore[attr-defined]
        return wrapper

    return decorator
