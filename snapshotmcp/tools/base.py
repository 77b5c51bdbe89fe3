"""
Operation descriptors and the result wrapper every catalog handler returns.

A handler is an async function `(ctx, args) -> data`. Wrapped with
`result_boundary`, any failure it raises is converted into
`{"status": "error", "error": ...}` so nothing crosses the handler boundary.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from loguru import logger

from snapshotmcp.utils.exceptions import GatewayError, render_error, sanitize_error_message

if TYPE_CHECKING:
    from snapshotmcp.context import GatewayContext

Handler = Callable[["GatewayContext", dict[str, Any]], Awaitable[dict[str, Any]]]

# Echo key standing for the raw argument mapping.
QUERY_ECHO = "query"


@dataclass(frozen=True)
class Operation:
    """One catalog entry: name, description, JSON input schema and handler."""
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Handler = field(repr=False, compare=False)

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def descriptor(self) -> dict[str, Any]:
        """Wire form for tools/list (handler omitted)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _echo(args: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    echoed: dict[str, Any] = {}
    for key in keys:
        echoed[key] = args if key == QUERY_ECHO else args.get(key)
    return echoed


def success_result(data: Any, **echo: Any) -> dict[str, Any]:
    return {"status": "success", "data": data, **echo}


def error_result(error: str, **echo: Any) -> dict[str, Any]:
    return {"status": "error", "error": error, **echo}


def result_boundary(*echo: str, log_errors: bool = True) -> Callable[[Callable[..., Awaitable[Any]]], Handler]:
    """
    Decorator turning a data-returning handler into a Result Wrapper handler.

    Usage:
        @result_boundary("space_id")
        async def get_space(ctx, args):
            return await ctx.data_client.get_space(args["space_id"])
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Handler:
        @functools.wraps(func)
        async def wrapper(ctx: "GatewayContext", args: dict[str, Any]) -> dict[str, Any]:
            echoed = _echo(args, echo)
            try:
                data = await func(ctx, args)
            except GatewayError as e:
                if log_errors:
                    logger.warning("{} failed [{}]: {}", func.__name__, e.code, sanitize_error_message(e.render()))
                return {**error_result(e.render(), **echoed), "error_code": e.code}
            except Exception as e:
                if log_errors:
                    logger.exception("{} raised unexpectedly: {}", func.__name__, sanitize_error_message(str(e)))
                return error_result(render_error(e), **echoed)
            return success_result(data, **echoed)

        return wrapper

    return decorator
