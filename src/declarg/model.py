# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declaring Options with Pydantic Models.

The `model` module derives option specs from the fields of a `pydantic` model,
so that a command-line interface can be declared as a typed model:

```python
class Arguments(BaseModel):
    count: int = Field(ge=1, le=10, description="Number of repetitions")
    color: Literal["RED", "GREEN", "BLUE"] = Field("RED", short="c")
    debug: bool = Field(False, short="d")
```

CLI specific metadata (`short`, `env`, `flag`, `choices`) is stored in the field's
`json_schema_extra` under the ``cli`` key.
"""

from collections.abc import Mapping, Sequence
from types import NoneType, UnionType
from typing import Any, Literal, Union, get_args, get_origin

import pydantic
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from declarg.log import get_logger
from declarg.option import OptionSpec
from declarg.registry import OptionRegistry
from declarg.values import PydanticModelT, Value, ValueType

logger = get_logger(__name__)

CLI_KEY = "cli"


def Field(  # noqa: N802
    default: Any = PydanticUndefined,
    *,
    short: str | None = None,
    env: str | None = None,
    flag: bool | None = None,
    choices: Sequence[str] | None = None,
    **kwargs: Any,
) -> Any:
    """Creates a pydantic field carrying command-line metadata.

    :param default: The default value, if none is given explicitly.
    :param short: An alias for the CLI, which is shown with a single "-".
    :param env: Environment variable consulted when the option is absent.
    :param flag: Whether a boolean field is a flag. Booleans are flags unless set to False.
    :param choices: Literal values the option accepts, for non-Literal annotations.
    :param kwargs: Generic pydantic Field() arguments.
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[CLI_KEY] = {
        "short": short,
        "env": env,
        "flag": flag,
        "choices": list(choices) if choices is not None else None,
    }
    return pydantic.Field(default, json_schema_extra=extra, **kwargs)


def _cli_metadata(info: FieldInfo) -> Mapping[str, Any]:
    extra = info.json_schema_extra
    if isinstance(extra, dict) and isinstance(extra.get(CLI_KEY), dict):
        return extra[CLI_KEY]  # type: ignore[return-value]
    return {}


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        types = [arg for arg in get_args(annotation) if arg is not NoneType]
        if len(types) == 1:
            return types[0]
    return annotation


def _bounds(info: FieldInfo) -> tuple[int | None, int | None]:
    lower: int | None = None
    upper: int | None = None

    for constraint in info.metadata:
        if (ge := getattr(constraint, "ge", None)) is not None:
            lower = ge
        if (gt := getattr(constraint, "gt", None)) is not None:
            lower = gt + 1
        if (le := getattr(constraint, "le", None)) is not None:
            upper = le
        if (lt := getattr(constraint, "lt", None)) is not None:
            upper = lt - 1

    return lower, upper


def option_name(field_name: str) -> str:
    return field_name.replace("_", "-")


def add_field(
    registry: OptionRegistry,
    name: str,
    info: FieldInfo,
    env_prefix: str | None = None,
) -> OptionSpec:
    """Registers one model field as an option.

    Args:
        registry (OptionRegistry): Registry to add the option to.
        name (str): Name of the field in the model.
        info (FieldInfo): The pydantic field.
        env_prefix (str | None): If set, fields without an explicit `env` fall
            back to the variable ``<env_prefix><NAME>``.

    Returns:
        OptionSpec: The new option.
    """
    cli = _cli_metadata(info)
    spec = registry.add_argument(option_name(name))
    annotation = _unwrap_optional(info.annotation)

    if info.description is not None:
        spec.help(info.description)
    if (short := cli.get("short")) is not None:
        spec.add_alias(short)
    if (env := cli.get("env")) is not None:
        spec.env(env)
    elif env_prefix is not None:
        spec.env(f"{env_prefix}{name.upper()}")

    if annotation is bool:
        if cli.get("flag") is False:
            spec.type_bool()
        else:
            spec.flag()
    elif annotation is int:
        spec.type_int()
        lower, upper = _bounds(info)
        if lower is not None:
            spec.min_value(lower)
        if upper is not None:
            spec.max_value(upper)
    elif annotation is float:
        spec.type_float()
    elif annotation is str:
        spec.type_string()
    elif get_origin(annotation) is Literal:
        choices = get_args(annotation)
        if all(isinstance(c, str) for c in choices):
            spec.type_string()
        spec.choices(str(c) for c in choices)
    if (choices := cli.get("choices")) is not None:
        spec.choices(choices)

    if info.is_required():
        spec.required()
    else:
        _set_default(spec, info.get_default(call_default_factory=True))

    return spec


def _set_default(spec: OptionSpec, default: Any) -> None:
    try:
        value = Value.of(default)
    except TypeError:
        logger.debug("%s: default %r is left to the model", spec.option_string, default)
        return

    if spec.declared_type is ValueType.FLOAT and value.kind is ValueType.INT:
        value = Value(ValueType.FLOAT, float(value.data))

    if spec.declared_type in (ValueType.AUTO, value.kind):
        spec.default_value(value.data)
    else:
        logger.debug("%s: default %r is left to the model", spec.option_string, default)


def registry_from_model(
    model: type[BaseModel],
    registry: OptionRegistry | None = None,
    env_prefix: str | None = None,
) -> OptionRegistry:
    """Registers one option per field of a `pydantic` model, in field order."""
    if registry is None:
        registry = OptionRegistry()

    for name, info in model.model_fields.items():
        add_field(registry, name, info, env_prefix)

    return registry
