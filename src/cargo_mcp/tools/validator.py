from __future__ import annotations

from typing import Any

from ..errors import ValidationError
from .base import CommonArgs, Param, Tool


def _check_string(name: str, value: Any, param: Param) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string, got {type(value).__name__}")
    if not value:
        raise ValidationError(f"'{name}' must not be empty")
    if "\x00" in value:
        raise ValidationError(f"'{name}' must not contain NUL bytes")
    if param.token and value.startswith("-"):
        raise ValidationError(f"'{name}' must not start with '-': {value!r}")
    return value


def _check_value(name: str, value: Any, param: Param) -> Any:
    if param.type == "boolean":
        if not isinstance(value, bool):
            raise ValidationError(f"'{name}' must be a boolean, got {type(value).__name__}")
        return value

    if param.type == "string":
        return _check_string(name, value, param)

    if param.type == "string_list":
        if not isinstance(value, list):
            raise ValidationError(f"'{name}' must be an array of strings, got {type(value).__name__}")
        items = tuple(_check_string(f"{name}[{i}]", v, param) for i, v in enumerate(value))
        if len(items) < param.min_items:
            raise ValidationError(f"'{name}' needs at least {param.min_items} item(s)")
        return items

    if param.type == "string_map":
        if not isinstance(value, dict):
            raise ValidationError(f"'{name}' must be an object of strings, got {type(value).__name__}")
        out: dict[str, str] = {}
        for k, v in value.items():
            if not k or "=" in k or "\x00" in k:
                raise ValidationError(f"'{name}' has an invalid key: {k!r}")
            if not isinstance(v, str):
                raise ValidationError(f"'{name}.{k}' must be a string, got {type(v).__name__}")
            if "\x00" in v:
                raise ValidationError(f"'{name}.{k}' must not contain NUL bytes")
            out[k] = v
        return out

    raise ValidationError(f"'{name}' has unsupported type {param.type}")


def _default(param: Param) -> Any:
    if param.type == "string_list":
        return ()
    if param.type == "string_map":
        return {}
    if param.type == "boolean":
        return bool(param.default)
    return param.default


def validate(tool: Tool, raw_args: Any) -> CommonArgs:
    """Turn an untyped argument bag into the tool's own frozen argument record.

    Unknown fields are rejected, not ignored.
    """
    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, dict):
        raise ValidationError(f"arguments for {tool.spec.name} must be an object")

    params = tool.spec.all_parameters
    unknown = sorted(k for k in raw_args if k not in params)
    if unknown:
        raise ValidationError(f"Unknown field(s) for {tool.spec.name}: {', '.join(map(str, unknown))}")

    kwargs: dict[str, Any] = {}
    for name, param in params.items():
        value = raw_args.get(name)
        if value is None:
            if param.required:
                raise ValidationError(f"Missing required field '{name}' for {tool.spec.name}")
            kwargs[name] = _default(param)
            continue
        kwargs[name] = _check_value(name, value, param)

    tc = kwargs.get("toolchain")
    if tc is not None:
        tc = tc[1:] if tc.startswith("+") else tc
        if not tc or any(c.isspace() for c in tc):
            raise ValidationError(f"Invalid toolchain: {raw_args.get('toolchain')!r}")
        kwargs["toolchain"] = tc

    for a, b in tool.spec.exclusive:
        if kwargs.get(a) and kwargs.get(b):
            raise ValidationError(f"'{a}' and '{b}' cannot be used together")

    return tool.args_type(**kwargs)
