# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Tagged Values and the Parse Result Table.

The `values` module contains the `ValueType` enum, the `Value` tagged union
used for both defaults and resolved values, and the `ValueTable` returned by a
successful parse.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import Any, TypeVar, overload

import pydantic
from pydantic import BaseModel

from declarg.errors import ValidationError
from declarg.utils import strip_dashes

T = TypeVar("T", int, float, str, bool)
PydanticModelT = TypeVar("PydanticModelT", bound=BaseModel)


@unique
class ValueType(Enum):
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    #: Only valid as a declared type; the kind is inferred from the raw value.
    AUTO = "auto"

    @classmethod
    def from_python(cls, type_: type) -> ValueType:
        for kind in (cls.INT, cls.FLOAT, cls.STRING, cls.BOOL):
            if type_ is kind.python_type:
                return kind
        raise TypeError(f"{type_!r} has no value kind")

    @property
    def python_type(self) -> type:
        match self:
            case ValueType.INT:
                return int
            case ValueType.FLOAT:
                return float
            case ValueType.STRING:
                return str
            case ValueType.BOOL:
                return bool
            case _:
                raise TypeError("AUTO has no python type")

    def zero(self) -> Value:
        """Returns the zero value of a concrete kind."""
        return Value(self, self.python_type())


@unique
class Source(Enum):
    """Where the value of an option came from."""

    COMMAND_LINE = "command line"
    ENVIRONMENT = "environment"
    DEFAULT = "default"


@dataclass(frozen=True)
class Value:
    """A payload tagged with its kind.

    Accessors never coerce: asking for a kind other than the stored one raises
    `TypeError`.
    """

    kind: ValueType
    data: int | float | str | bool

    def __post_init__(self) -> None:
        if self.kind is ValueType.AUTO:
            raise TypeError("a stored value needs a concrete kind")
        # bool is an int subclass, so compare the exact type.
        if type(self.data) is not self.kind.python_type:
            raise TypeError(f"{self.data!r} is not of kind {self.kind.value}")

    @classmethod
    def of(cls, data: int | float | str | bool) -> Value:
        return cls(ValueType.from_python(type(data)), data)

    def unwrap(self, kind: ValueType | type) -> Any:
        if not isinstance(kind, ValueType):
            kind = ValueType.from_python(kind)
        if kind is not self.kind:
            raise TypeError(f"value is {self.kind.value}, not {kind.value}")
        return self.data

    def render(self) -> str:
        """Renders the payload the way it would be written on the command line."""
        match self.kind:
            case ValueType.BOOL:
                return "true" if self.data else "false"
            case ValueType.FLOAT:
                return repr(self.data)
            case _:
                return str(self.data)


class ValueTable(Mapping[str, Any]):
    """Immutable result of one successful parse.

    The table maps every canonical option name to its `Value`. The mapping
    protocol yields the unwrapped python payloads; `get_as()` and `value()`
    additionally accept aliases and dashed names.
    """

    def __init__(
        self,
        values: Mapping[str, Value],
        aliases: Mapping[str, str] | None = None,
        sources: Mapping[str, Source] | None = None,
    ) -> None:
        self._values = MappingProxyType(dict(values))
        self._aliases = MappingProxyType(dict(aliases) if aliases is not None else {})
        self._sources = MappingProxyType(dict(sources) if sources is not None else {})

    def _canonical(self, name: str) -> str:
        key = strip_dashes(name)
        if key in self._values:
            return key
        if key in self._aliases:
            return self._aliases[key]
        raise KeyError(name)

    def value(self, name: str) -> Value:
        return self._values[self._canonical(name)]

    def source(self, name: str) -> Source:
        return self._sources.get(self._canonical(name), Source.DEFAULT)

    @overload
    def get_as(self, name: str, kind: type[T]) -> T: ...

    @overload
    def get_as(self, name: str, kind: ValueType) -> Any: ...

    def get_as(self, name: str, kind: type | ValueType) -> Any:
        """Returns the payload of `name` if it is stored with the requested kind.

        Args:
            name (str): Canonical name or alias, with or without dashes.
            kind (type | ValueType): One of `int`, `float`, `str`, `bool` or a
                concrete `ValueType`.

        Raises:
            KeyError: The table has no such option.
            TypeError: The stored kind differs from the requested one.
        """
        return self.value(name).unwrap(kind)

    def __getitem__(self, name: str) -> Any:
        return self._values[name].data

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValueTable({self.to_dict()!r})"

    def to_dict(self) -> dict[str, Any]:
        return {name: value.data for name, value in self._values.items()}

    def to_model(
        self,
        model: type[PydanticModelT],
        exclude_defaults: bool = False,
    ) -> PydanticModelT:
        """Validates the table into an instance of a `pydantic` model.

        Option names are mapped to field names by replacing ``-`` with ``_``.

        Args:
            model (type[BaseModel]): The model to validate into.
            exclude_defaults (bool): Leave out options which kept their
                default, so that the model applies its own defaults.

        Raises:
            ValidationError: The model rejects the values.
        """
        data = {
            name.replace("-", "_"): value.data
            for name, value in self._values.items()
            if not exclude_defaults or self.source(name) is not Source.DEFAULT
        }

        try:
            return model.model_validate(data)
        except pydantic.ValidationError as exc:
            raise ValidationError(_format_pydantic_error(exc)) from exc


def _format_pydantic_error(error: pydantic.ValidationError) -> str:
    messages = []

    for e in error.errors():
        try:
            message = str(e["ctx"]["error"])
        except KeyError:
            message = e["msg"]

        if len(e["loc"]) > 0:
            argument = str(e["loc"][0]).replace("_", "-")
            message = f"argument --{argument}: {message}"

        messages.append(message)

    return "; ".join(messages)
