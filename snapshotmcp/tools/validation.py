"""Central argument check run before every catalog handler."""

from __future__ import annotations

from typing import Any

from snapshotmcp.utils.exceptions import ValidationError


def validate_arguments(schema: dict[str, Any], args: Any) -> dict[str, Any]:
    """
    Check `args` against a tool's input schema and return it.

    Only structure is checked: the arguments must be an object, required
    fields must be present and non-null, and enum fields must hold an allowed
    value. JSON types and numeric ranges are left to the handler.
    """
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ValidationError("Tool arguments must be an object", field="arguments")

    for name in schema.get("required", []):
        if args.get(name) is None:
            raise ValidationError(f"Missing required parameter: {name}", field=name)

    properties = schema.get("properties", {})
    for name, value in args.items():
        spec = properties.get(name)
        if not spec or value is None:
            continue
        allowed = spec.get("enum")
        if allowed is not None and value not in allowed:
            raise ValidationError(
                f"Invalid value for {name}: {value!r}. Allowed: {', '.join(map(str, allowed))}",
                field=name,
            )
    return args
